"""
Shared constants for congeneric reliability estimation.

This module contains threshold constants, type definitions, and numeric
limits used across the reliability submodules.
"""

from typing import Literal


# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

# Aggregation used by the item-deleted estimates.
# "corrected" resets the weight sums for each excluded item; "legacy"
# reproduces historical output (see feldt_gilmer_item_deleted()).
ItemDeletedMethodLiteral = Literal["legacy", "corrected"]

VALID_ITEM_DELETED_METHODS = {"legacy", "corrected"}


# =============================================================================
# FELDT-GILMER LIMITS
# =============================================================================

# The coefficient is undefined below three items: with two items the
# non-pivot weight ratio is 0/0.
MIN_ITEMS_FELDT_GILMER = 3


# =============================================================================
# INTERPRETATION THRESHOLDS
# =============================================================================
# Standard psychometric thresholds for reliability interpretation.
# Feldt-Gilmer estimates internal consistency, so the same ladder as
# Cronbach's alpha applies.

RELIABILITY_THRESHOLDS = {
    "excellent": 0.90,  # >= 0.90: Excellent reliability
    "good": 0.80,  # >= 0.80: Good reliability
    "acceptable": 0.70,  # >= 0.70: Acceptable reliability
    "questionable": 0.60,  # >= 0.60: Questionable reliability
    "poor": 0.50,  # >= 0.50: Poor reliability
    # < 0.50: Unacceptable
}

# Interpretation for NaN or infinite coefficients
UNDEFINED_INTERPRETATION = "undefined"


# =============================================================================
# TEXT REPORT LAYOUT
# =============================================================================

SUMMARY_LABEL = "Feldt-Gilmer = "
SUMMARY_LABEL_WIDTH = 15

ITEM_DELETED_HEADER = " Feldt-Gilmer if Item Deleted"
ITEM_DELETED_RULE_WIDTH = 56
ITEM_LABEL_WIDTH = 10
ITEM_VALUE_WIDTH = 10
ITEM_COLUMN_GAP = 5

# Default item label prefix when the caller supplies no labels (item1, item2, ...)
DEFAULT_ITEM_LABEL_PREFIX = "item"
