r"""
Feldt-Gilmer reliability for congeneric items.

The Feldt-Gilmer coefficient estimates score reliability when items measure a
single latent trait with possibly unequal loadings. Each item is weighted by
an estimate of its loading relative to a pivot item, the item whose
covariances with the rest of the test sum highest.

Weights (pivot ℓ):
    d[ℓ] = 1
    d[i] = (R_i − σ_iℓ − σ²_i) / (R_ℓ − σ_iℓ − σ²_ℓ)

Coefficient:
    FG = (D² / (D² − Σd²ᵢ)) × ((σ²ₜ − Σσ²ᵢ) / σ²ₜ)

Where:
    R_i = sum of row i of the covariance matrix (including the variance)
    D = Σd[i]
    σ²ᵢ = variance of item i
    σ²ₜ = variance of total scores (sum of every matrix entry)

Degenerate denominators are not trapped: NaN and infinite weights or
coefficients are part of the numeric contract and reach the caller unchanged.

Usage Example:
    from congeneric.core.reliability import (
        CovarianceMatrix,
        feldt_gilmer,
        feldt_gilmer_item_deleted,
    )

    matrix = CovarianceMatrix([[4, 2, 2], [2, 5, 2], [2, 2, 6]])
    print(f"Feldt-Gilmer: {feldt_gilmer(matrix):.4f}")  # 0.6667

    for index, value in enumerate(feldt_gilmer_item_deleted(matrix)):
        print(f"Without item {index}: {value:.4f}")

Reference:
    Feldt, L. S. & Brennan, R. L. (1989). Reliability. In R. L. Linn (Ed.),
    Educational Measurement (3rd ed.).
"""

import logging
from typing import Optional, Union

import numpy as np

from congeneric.core.config import settings
from ._constants import (
    MIN_ITEMS_FELDT_GILMER,
    VALID_ITEM_DELETED_METHODS,
    ItemDeletedMethodLiteral,
)
from ._types import PivotWeights
from .covariance import CovarianceMatrix, as_covariance_matrix

try:
    from numpy.typing import ArrayLike, NDArray
except ImportError:
    ArrayLike = object  # type: ignore
    NDArray = np.ndarray  # type: ignore

logger = logging.getLogger(__name__)

MatrixInput = Union[CovarianceMatrix, "ArrayLike"]


def select_pivot(matrix: MatrixInput, excluded: Optional[int] = None) -> int:
    """
    Select the item with the largest covariance sum against the other items.

    For each item i the off-diagonal sum is R_i − σ²_i. The scan runs left to
    right with a strict greater-than comparison, so ties go to the lowest
    index. The running maximum is seeded from the first candidate's own
    value; a NaN first candidate therefore stays selected, and later NaNs are
    never selected.

    Args:
        matrix: Covariance matrix.
        excluded: Optional item index to ignore entirely. It is never a
            candidate.

    Returns:
        Index of the pivot item.

    Raises:
        ValueError: If no candidate remains (a one-item matrix with that item
            excluded).
    """
    matrix = as_covariance_matrix(matrix)
    values = matrix.values
    off_diagonal = matrix.row_sums() - np.diag(values)

    candidates = [i for i in range(matrix.n_items) if i != excluded]
    if not candidates:
        raise ValueError(
            f"No pivot candidate: all {matrix.n_items} item(s) excluded"
        )

    max_index = candidates[0]
    max_value = off_diagonal[max_index]
    for i in candidates[1:]:
        if off_diagonal[i] > max_value:
            max_index = i
            max_value = off_diagonal[i]

    logger.debug(
        f"Pivot item {max_index} selected (off-diagonal sum {max_value})",
        extra={"pivot": max_index, "excluded_item": excluded},
    )
    return max_index


def compute_weights(
    matrix: MatrixInput,
    pivot: int,
    excluded: Optional[int] = None,
) -> "NDArray[np.float64]":
    """
    Derive each item's weight relative to the pivot item.

    d[i] is the ratio of item i's covariance with the rest of the test
    (excluding itself and the pivot) to the pivot's matching covariance sum,
    an estimate of the loading ratio λ_i / λ_ℓ under the congeneric model.

    Row sums always cover the full matrix row. When an item is excluded its
    slot is skipped and left at 0.0.

    Args:
        matrix: Covariance matrix.
        pivot: Pivot item index; its weight is exactly 1.0.
        excluded: Optional item index to skip.

    Returns:
        Weight vector of length n. A zero denominator yields ±inf (or NaN
        for 0/0); no exception is raised.
    """
    matrix = as_covariance_matrix(matrix)
    values = matrix.values
    row_sums = matrix.row_sums()

    weights = np.zeros(matrix.n_items, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for i in range(matrix.n_items):
            if i == excluded:
                continue
            if i == pivot:
                weights[i] = 1.0
                continue
            covariance_with_pivot = values[i, pivot]
            numerator = row_sums[i] - covariance_with_pivot - values[i, i]
            denominator = row_sums[pivot] - covariance_with_pivot - values[pivot, pivot]
            weights[i] = numerator / denominator

    if not np.isfinite(weights).all():
        logger.debug(
            "Non-finite weight ratio(s) for pivot item",
            extra={"pivot": pivot, "excluded_item": excluded},
        )
    return weights


def derive_pivot_weights(
    matrix: MatrixInput, excluded: Optional[int] = None
) -> PivotWeights:
    """Select the pivot and derive the weight vector in one step."""
    matrix = as_covariance_matrix(matrix)
    pivot = select_pivot(matrix, excluded=excluded)
    return {
        "pivot": pivot,
        "weights": compute_weights(matrix, pivot, excluded=excluded),
    }


def _coefficient(
    sum_d: float,
    sum_d2: float,
    observed_variance: float,
    component_variance: float,
) -> float:
    """Combine weight sums and variances into the Feldt-Gilmer formula."""
    sum_d = np.float64(sum_d)
    sum_d2 = np.float64(sum_d2)
    observed_variance = np.float64(observed_variance)
    component_variance = np.float64(component_variance)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        sum_d_squared = sum_d**2
        weighting = sum_d_squared / (sum_d_squared - sum_d2)
        covariance_share = (observed_variance - component_variance) / observed_variance
        return float(weighting * covariance_share)


def feldt_gilmer(matrix: MatrixInput) -> float:
    """
    Calculate the Feldt-Gilmer reliability coefficient.

    Args:
        matrix: Covariance matrix (CovarianceMatrix or square array-like).

    Returns:
        The coefficient. NaN when there are fewer than three items; NaN or
        ±inf when a denominator in the formula is zero.

    Raises:
        CovarianceMatrixError: If an array-like input fails validation.
    """
    matrix = as_covariance_matrix(matrix)
    n_items = matrix.n_items

    if n_items < MIN_ITEMS_FELDT_GILMER:
        logger.warning(
            f"Feldt-Gilmer undefined for {n_items} item(s) "
            f"(need at least {MIN_ITEMS_FELDT_GILMER})",
            extra={"n_items": n_items},
        )
        return float("nan")

    derived = derive_pivot_weights(matrix)
    weights = derived["weights"]

    coefficient = _coefficient(
        sum_d=weights.sum(),
        sum_d2=(weights**2).sum(),
        observed_variance=matrix.total_variance(),
        component_variance=matrix.diagonal_sum(),
    )

    if not np.isfinite(coefficient):
        logger.warning(
            f"Feldt-Gilmer coefficient is not finite ({coefficient})",
            extra={"n_items": n_items, "pivot": derived["pivot"]},
        )
    else:
        logger.info(
            f"Feldt-Gilmer calculated: {coefficient:.4f} from {n_items} items",
            extra={
                "n_items": n_items,
                "pivot": derived["pivot"],
                "coefficient": coefficient,
            },
        )
    return coefficient


def _resolve_method(method: Optional[str]) -> ItemDeletedMethodLiteral:
    if method is None:
        resolved = settings.ITEM_DELETED_METHOD
    else:
        # Accepts ItemDeletedMethod enum members as well as plain strings
        resolved = getattr(method, "value", method)
    if resolved not in VALID_ITEM_DELETED_METHODS:
        raise ValueError(
            f"Invalid item-deleted method: '{resolved}'. "
            f"Must be one of: {sorted(VALID_ITEM_DELETED_METHODS)}"
        )
    return resolved  # type: ignore[return-value]


def feldt_gilmer_item_deleted(
    matrix: MatrixInput,
    method: Optional[ItemDeletedMethodLiteral] = None,
) -> "NDArray[np.float64]":
    """
    Calculate the Feldt-Gilmer coefficient with each item omitted in turn.

    Element k of the result is the estimate without item k. For every k the
    variances are adjusted to drop item k, the pivot is chosen among the
    remaining items, and the weights are derived with item k skipped.

    Aggregation methods:
        corrected: The weight sums are reset for each k and accumulated over
            the retained items only.
        legacy: Reproduces historical output bit for bit. The sums run across
            all k without resetting, and each step adds the excluded item's
            own weight (always 0.0), so every element comes out NaN. Use it
            only to compare against results produced by the old routine.

    There is no minimum item count; small matrices may yield NaN or ±inf.

    Args:
        matrix: Covariance matrix (CovarianceMatrix or square array-like).
        method: "corrected" or "legacy". Defaults to
            settings.ITEM_DELETED_METHOD.

    Returns:
        Array of length n, index-aligned with the matrix items.

    Raises:
        CovarianceMatrixError: If an array-like input fails validation.
        ValueError: If method is not a known aggregation method.
    """
    matrix = as_covariance_matrix(matrix)
    method = _resolve_method(method)
    values = matrix.values
    n_items = matrix.n_items

    total_variance = np.float64(matrix.total_variance())
    diagonal_sum = np.float64(matrix.diagonal_sum())

    reliabilities = np.empty(n_items, dtype=np.float64)
    sum_d_adj = np.float64(0.0)
    sum_d2_adj = np.float64(0.0)

    for k in range(n_items):
        retained = np.arange(n_items) != k

        item_variance = values[k, k]
        item_covariance = 2 * values[k, retained].sum()

        total_variance_adjusted = total_variance - item_covariance - item_variance
        diagonal_sum_adjusted = diagonal_sum - item_variance

        if n_items > 1:
            weights_adj = derive_pivot_weights(matrix, excluded=k)["weights"]
        else:
            weights_adj = np.zeros(n_items, dtype=np.float64)

        if method == "legacy":
            for j in range(n_items):
                if k != j:
                    sum_d_adj += weights_adj[k]
                sum_d2_adj += weights_adj[k] ** 2
        else:
            sum_d_adj = weights_adj[retained].sum()
            sum_d2_adj = (weights_adj[retained] ** 2).sum()

        reliabilities[k] = _coefficient(
            sum_d=sum_d_adj,
            sum_d2=sum_d2_adj,
            observed_variance=total_variance_adjusted,
            component_variance=diagonal_sum_adjusted,
        )

    logger.info(
        f"Feldt-Gilmer item-deleted estimates calculated for {n_items} items "
        f"({method} aggregation)",
        extra={"n_items": n_items, "method": method},
    )
    return reliabilities
