r"""
Congeneric reliability estimation.

This package implements the Feldt-Gilmer coefficient, a reliability estimate
for tests whose items measure one latent trait with possibly unequal
loadings, and its item-deleted counterpart:
- Covariance matrix value type with construction-time validation
- Pivot selection and weight-ratio derivation
- Overall and item-deleted Feldt-Gilmer coefficients
- Structured report, interpretation, and text rendering

The numeric functions never format text, and the report functions never
change the numbers.

Usage Example
-------------
Compute the coefficient and item-deleted estimates:

    from congeneric.core.reliability import (
        CovarianceMatrix,
        feldt_gilmer,
        feldt_gilmer_item_deleted,
    )

    matrix = CovarianceMatrix([[4, 2, 2], [2, 5, 2], [2, 2, 6]])
    print(f"Feldt-Gilmer: {feldt_gilmer(matrix):.4f}")  # 0.6667
    print(feldt_gilmer_item_deleted(matrix))            # [0.5333 0.5714 0.6154]

Generate a report with item labels:

    from congeneric.core.reliability import (
        build_feldt_gilmer_report,
        format_item_deleted_table,
        format_summary,
    )

    report = build_feldt_gilmer_report(matrix, labels=["q1", "q2", "q3"])
    print(format_summary(report.coefficient))
    print(format_item_deleted_table(report))
"""

# =============================================================================
# Public API exports
# =============================================================================

# Type definitions
from ._constants import ItemDeletedMethodLiteral
from ._types import ItemReviewFlag, PivotWeights

# Threshold constants
from ._constants import (
    MIN_ITEMS_FELDT_GILMER,
    RELIABILITY_THRESHOLDS,
    UNDEFINED_INTERPRETATION,
)

# Covariance matrix
from .covariance import (
    CovarianceMatrix,
    CovarianceMatrixError,
    as_covariance_matrix,
)

# Feldt-Gilmer estimator
from .feldt_gilmer import (
    compute_weights,
    derive_pivot_weights,
    feldt_gilmer,
    feldt_gilmer_item_deleted,
    select_pivot,
)

# Report and rendering
from .report import (
    build_feldt_gilmer_report,
    default_item_labels,
    format_item_deleted_table,
    format_summary,
    get_interpretation,
    get_negative_contributors,
)

__all__ = [
    # Type definitions
    "ItemDeletedMethodLiteral",
    "ItemReviewFlag",
    "PivotWeights",
    # Threshold constants
    "MIN_ITEMS_FELDT_GILMER",
    "RELIABILITY_THRESHOLDS",
    "UNDEFINED_INTERPRETATION",
    # Covariance matrix
    "CovarianceMatrix",
    "CovarianceMatrixError",
    "as_covariance_matrix",
    # Feldt-Gilmer estimator
    "compute_weights",
    "derive_pivot_weights",
    "feldt_gilmer",
    "feldt_gilmer_item_deleted",
    "select_pivot",
    # Report and rendering
    "build_feldt_gilmer_report",
    "default_item_labels",
    "format_item_deleted_table",
    "format_summary",
    "get_interpretation",
    "get_negative_contributors",
]
