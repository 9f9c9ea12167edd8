"""
Feldt-Gilmer report generation and text rendering.

This module sits on top of the numeric core. It turns the estimator output
into a structured FeldtGilmerReport, interprets the coefficient, flags items
whose removal would raise reliability, and renders the plain-text summary
line and item-deleted table.

Usage Example:
    from congeneric.core.reliability import (
        build_feldt_gilmer_report,
        format_item_deleted_table,
        format_summary,
        get_negative_contributors,
    )

    report = build_feldt_gilmer_report(matrix, labels=["q1", "q2", "q3", "q4"])

    print(format_summary(report.coefficient))  # "Feldt-Gilmer = 0.81"
    print(format_item_deleted_table(report))

    for flag in get_negative_contributors(report):
        print(f"{flag['label']}: {flag['recommendation']}")
"""

import logging
import math
from typing import List, Optional, Sequence

from congeneric.core.config import settings
from congeneric.schemas.reliability import (
    FeldtGilmerReport,
    ItemDeletedEstimate,
    ItemDeletedMethod,
    ReliabilityInterpretation,
)
from ._constants import (
    DEFAULT_ITEM_LABEL_PREFIX,
    ITEM_COLUMN_GAP,
    ITEM_DELETED_HEADER,
    ITEM_DELETED_RULE_WIDTH,
    ITEM_LABEL_WIDTH,
    ITEM_VALUE_WIDTH,
    MIN_ITEMS_FELDT_GILMER,
    RELIABILITY_THRESHOLDS,
    SUMMARY_LABEL,
    SUMMARY_LABEL_WIDTH,
    UNDEFINED_INTERPRETATION,
    ItemDeletedMethodLiteral,
)
from ._types import ItemReviewFlag
from .covariance import as_covariance_matrix
from .feldt_gilmer import (
    MatrixInput,
    feldt_gilmer,
    feldt_gilmer_item_deleted,
    select_pivot,
)

logger = logging.getLogger(__name__)


def get_interpretation(value: float) -> str:
    """
    Get interpretation string for a Feldt-Gilmer coefficient.

    Args:
        value: Reliability coefficient

    Returns:
        Interpretation: "excellent", "good", "acceptable", "questionable",
                       "poor", "unacceptable", or "undefined" for NaN/inf
    """
    if not math.isfinite(value):
        return UNDEFINED_INTERPRETATION
    if value >= RELIABILITY_THRESHOLDS["excellent"]:
        return "excellent"
    elif value >= RELIABILITY_THRESHOLDS["good"]:
        return "good"
    elif value >= RELIABILITY_THRESHOLDS["acceptable"]:
        return "acceptable"
    elif value >= RELIABILITY_THRESHOLDS["questionable"]:
        return "questionable"
    elif value >= RELIABILITY_THRESHOLDS["poor"]:
        return "poor"
    else:
        return "unacceptable"


def default_item_labels(n_items: int) -> List[str]:
    """Labels item1..itemN for callers that supply none."""
    return [f"{DEFAULT_ITEM_LABEL_PREFIX}{i + 1}" for i in range(n_items)]


def build_feldt_gilmer_report(
    matrix: MatrixInput,
    labels: Optional[Sequence[str]] = None,
    method: Optional[ItemDeletedMethodLiteral] = None,
) -> FeldtGilmerReport:
    """
    Evaluate a covariance matrix and package the results.

    Args:
        matrix: Covariance matrix (CovarianceMatrix or square array-like)
        labels: Optional item labels, one per item in matrix order
        method: Item-deleted aggregation; defaults to settings.ITEM_DELETED_METHOD

    Returns:
        FeldtGilmerReport with the overall coefficient, its interpretation,
        the pivot item, and one ItemDeletedEstimate per item

    Raises:
        CovarianceMatrixError: If the matrix fails validation
        ValueError: If the number of labels differs from the number of items
            or the method is unknown
    """
    matrix = as_covariance_matrix(matrix)
    n_items = matrix.n_items

    if labels is None:
        labels = default_item_labels(n_items)
    elif len(labels) != n_items:
        raise ValueError(
            f"Expected {n_items} item labels, got {len(labels)}"
        )

    coefficient = feldt_gilmer(matrix)
    deleted = feldt_gilmer_item_deleted(matrix, method=method)
    resolved_method = ItemDeletedMethod(method or settings.ITEM_DELETED_METHOD)

    pivot = select_pivot(matrix) if n_items >= MIN_ITEMS_FELDT_GILMER else None

    item_deleted = [
        ItemDeletedEstimate(
            index=i,
            label=str(labels[i]),
            reliability=float(deleted[i]),
            change=float(deleted[i]) - coefficient,
        )
        for i in range(n_items)
    ]

    report = FeldtGilmerReport(
        coefficient=coefficient,
        interpretation=ReliabilityInterpretation(get_interpretation(coefficient)),
        meets_threshold=(
            math.isfinite(coefficient)
            and coefficient >= settings.RELIABILITY_THRESHOLD
        ),
        num_items=n_items,
        pivot=pivot,
        method=resolved_method,
        item_deleted=item_deleted,
    )

    logger.info(
        f"Feldt-Gilmer report generated: {report.interpretation.value} "
        f"({n_items} items, {resolved_method.value} item-deleted aggregation)",
        extra={
            "n_items": n_items,
            "pivot": pivot,
            "method": resolved_method.value,
        },
    )
    return report


def get_negative_contributors(
    report: FeldtGilmerReport,
    threshold: float = 0.0,
) -> List[ItemReviewFlag]:
    """
    Identify items whose removal would raise the Feldt-Gilmer coefficient.

    Items with a finite change above the threshold weaken overall reliability
    and should be reviewed.

    Args:
        report: Result from build_feldt_gilmer_report()
        threshold: Minimum gain from deleting an item before it is flagged

    Returns:
        List of ItemReviewFlag TypedDicts, largest gain first
    """
    flagged: List[ItemReviewFlag] = []

    for estimate in report.item_deleted:
        if not math.isfinite(estimate.change) or estimate.change <= threshold:
            continue
        flagged.append(
            {
                "index": estimate.index,
                "label": estimate.label,
                "reliability_if_deleted": estimate.reliability,
                "change": estimate.change,
                "recommendation": (
                    f"Removing this item raises reliability by {estimate.change:.4f}. "
                    "It may be measuring a different trait. Consider revising "
                    "or removing it."
                ),
            }
        )

    # Largest gain first
    flagged.sort(key=lambda x: x["change"], reverse=True)

    return flagged


def _format_number(value: float, decimals: int, width: int = 0) -> str:
    if math.isnan(value):
        text = "NaN"
    elif math.isinf(value):
        text = "Inf" if value > 0 else "-Inf"
    else:
        text = f"{value:.{decimals}f}"
    return text.rjust(width)


def format_summary(coefficient: Optional[float], decimals: Optional[int] = None) -> str:
    """
    Render the one-line coefficient summary, e.g. "Feldt-Gilmer = 0.67".

    Args:
        coefficient: Feldt-Gilmer coefficient (None renders as NaN)
        decimals: Decimal places; defaults to settings.REPORT_SUMMARY_DECIMALS
    """
    if decimals is None:
        decimals = settings.REPORT_SUMMARY_DECIMALS
    value = float("nan") if coefficient is None else coefficient
    return f"{SUMMARY_LABEL:>{SUMMARY_LABEL_WIDTH}}{_format_number(value, decimals)}"


def format_item_deleted_table(
    report: FeldtGilmerReport,
    decimals: Optional[int] = None,
) -> str:
    """
    Render the item-deleted estimates as a fixed-width text table.

    Layout: a header and a rule 56 characters wide, then one line per item
    with the label left-aligned in 10 characters and the value right-aligned
    in 10. A footer names the aggregation when it is the legacy one.

    Args:
        report: Result from build_feldt_gilmer_report()
        decimals: Decimal places; defaults to settings.REPORT_ITEM_DECIMALS
    """
    if decimals is None:
        decimals = settings.REPORT_ITEM_DECIMALS
    gap = " " * ITEM_COLUMN_GAP

    lines = [
        f"{ITEM_DELETED_HEADER:<{ITEM_DELETED_RULE_WIDTH}}",
        "=" * ITEM_DELETED_RULE_WIDTH,
    ]
    for estimate in report.item_deleted:
        value = _format_number(estimate.reliability, decimals, ITEM_VALUE_WIDTH)
        lines.append(f"{estimate.label:<{ITEM_LABEL_WIDTH}}{gap}{value}{gap}")

    if report.method == ItemDeletedMethod.LEGACY:
        lines.append("Item-deleted values use the legacy aggregation.")

    return "\n".join(lines) + "\n"
