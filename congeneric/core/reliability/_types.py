"""
TypedDict definitions for reliability calculation results.

These structured types describe the plain-dict values passed between the
numeric core and the report layer.
"""

from typing import TypedDict

import numpy as np

try:
    from numpy.typing import NDArray
except ImportError:
    NDArray = np.ndarray  # type: ignore


class PivotWeights(TypedDict):
    """
    Pivot item and weight vector behind a single Feldt-Gilmer evaluation.

    Fields:
        pivot: Index of the item with the largest covariance sum against the
            other items. Its weight is exactly 1.0.
        weights: Per-item weight ratios relative to the pivot. Entries may be
            NaN or infinite when a denominator is zero.
    """

    pivot: int
    weights: "NDArray[np.float64]"


class ItemReviewFlag(TypedDict):
    """
    An item whose removal would raise the Feldt-Gilmer coefficient.

    Used by get_negative_contributors() to provide type-safe return values.
    """

    index: int
    label: str
    reliability_if_deleted: float
    change: float
    recommendation: str
