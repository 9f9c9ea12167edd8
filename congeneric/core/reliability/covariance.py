"""
Immutable item covariance matrix used by the congeneric reliability estimators.

The matrix is validated once at construction and never mutated afterwards.
Every estimator receives the same read-only view, so repeated evaluations
are pure functions of the input.

Usage Example:
    from congeneric.core.reliability import CovarianceMatrix

    matrix = CovarianceMatrix([[4, 2, 2], [2, 5, 2], [2, 2, 6]])
    matrix.row_sums()        # array([ 8.,  9., 10.])
    matrix.total_variance()  # 27.0
    matrix.diagonal_sum()    # 15.0
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from congeneric.core.config import settings

try:
    from numpy.typing import ArrayLike, NDArray
except ImportError:
    ArrayLike = Any  # type: ignore
    NDArray = np.ndarray  # type: ignore

logger = logging.getLogger(__name__)


class CovarianceMatrixError(ValueError):
    """Raised when a covariance matrix violates its structural invariants.

    Attributes:
        message: Human-readable error description
        context: Details about the offending input (shape, indices, values)
        original_error: The underlying exception, when conversion failed
    """

    def __init__(  # noqa: D107
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            msg = f"{msg} (context: {ctx_str})"
        if self.original_error:
            msg = f"{msg} - caused by: {str(self.original_error)}"
        return msg


class CovarianceMatrix:
    """
    Square, symmetric item covariance matrix with non-negative variances.

    The diagonal entry at index i is the variance of item i; entry (i, j) is
    the covariance of items i and j. The constructor copies the caller's data
    into a read-only float64 array, so mutating the source afterwards has no
    effect on the matrix.

    Args:
        values: Square array-like of covariances.
        symmetry_tolerance: Absolute tolerance for the symmetry check.
            Defaults to settings.SYMMETRY_TOLERANCE.
        symmetry_rtol: Relative tolerance for the symmetry check, scaled by
            the magnitude of each entry. Defaults to settings.SYMMETRY_RTOL.

    Raises:
        CovarianceMatrixError: If the input cannot be converted to a float
            array, is not a non-empty square matrix, contains NaN or infinite
            entries, is not symmetric, or has a negative variance.
    """

    __slots__ = ("_values",)

    def __init__(
        self,
        values: "ArrayLike",
        *,
        symmetry_tolerance: Optional[float] = None,
        symmetry_rtol: Optional[float] = None,
    ) -> None:
        tolerance = (
            settings.SYMMETRY_TOLERANCE
            if symmetry_tolerance is None
            else symmetry_tolerance
        )
        rtol = settings.SYMMETRY_RTOL if symmetry_rtol is None else symmetry_rtol
        array = _to_float_array(values)
        _validate(array, tolerance, rtol)
        array.setflags(write=False)
        self._values: "NDArray[np.float64]" = array

    @property
    def values(self) -> "NDArray[np.float64]":
        """Read-only view of the underlying covariances."""
        return self._values

    @property
    def n_items(self) -> int:
        """Number of items (rows/columns)."""
        return int(self._values.shape[0])

    def __len__(self) -> int:
        return self.n_items

    def __getitem__(self, key: Any) -> Any:
        return self._values[key]

    def __repr__(self) -> str:
        return f"CovarianceMatrix(n_items={self.n_items})"

    def variance(self, i: int) -> float:
        """Variance of item i (diagonal entry)."""
        return float(self._values[i, i])

    def row_sum(self, i: int) -> float:
        """Sum of row i, including the diagonal entry."""
        return float(self._values[i].sum())

    def row_sums(self) -> "NDArray[np.float64]":
        """Row sums for every item, each including its own variance."""
        return self._values.sum(axis=1)

    def total_variance(self) -> float:
        """
        Variance of the summed test score.

        Equal to the sum of every entry, so each off-diagonal covariance is
        counted once in each direction.
        """
        return float(self._values.sum())

    def diagonal_sum(self) -> float:
        """Sum of item variances (component variance)."""
        return float(np.trace(self._values))

    def permuted(self, order: Sequence[int]) -> "CovarianceMatrix":
        """
        Return the matrix with items reordered.

        Row and column i of the result are row and column order[i] of this
        matrix.
        """
        index = np.asarray(order, dtype=np.intp)
        if sorted(index.tolist()) != list(range(self.n_items)):
            raise CovarianceMatrixError(
                "Item order must be a permutation of all item indices",
                context={"n_items": self.n_items, "order": list(order)},
            )
        return CovarianceMatrix._from_validated(self._values[np.ix_(index, index)])

    @classmethod
    def _from_validated(cls, array: "NDArray[np.float64]") -> "CovarianceMatrix":
        """Wrap an array derived from an already validated matrix."""
        instance = cls.__new__(cls)
        array = np.array(array, dtype=np.float64)
        array.setflags(write=False)
        instance._values = array
        return instance


def _to_float_array(values: "ArrayLike") -> "NDArray[np.float64]":
    """Copy the input into a fresh float64 array."""
    try:
        return np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise CovarianceMatrixError(
            "Covariance matrix must contain only real numbers",
            original_error=e,
        ) from e


def _validate(array: "NDArray[np.float64]", tolerance: float, rtol: float) -> None:
    if array.ndim != 2:
        raise CovarianceMatrixError(
            "Covariance matrix must be two-dimensional",
            context={"ndim": array.ndim},
        )

    n_rows, n_cols = array.shape
    if n_rows != n_cols:
        raise CovarianceMatrixError(
            "Covariance matrix must be square",
            context={"shape": array.shape},
        )
    if n_rows == 0:
        raise CovarianceMatrixError("Covariance matrix must contain at least one item")

    if not np.isfinite(array).all():
        row, col = (int(x) for x in np.argwhere(~np.isfinite(array))[0])
        raise CovarianceMatrixError(
            "Covariance matrix contains NaN or infinite entries",
            context={"row": row, "col": col, "value": array[row, col]},
        )

    if not np.allclose(array, array.T, rtol=rtol, atol=tolerance):
        deviation = np.abs(array - array.T)
        row, col = (int(x) for x in np.unravel_index(np.argmax(deviation), deviation.shape))
        raise CovarianceMatrixError(
            "Covariance matrix is not symmetric",
            context={
                "row": row,
                "col": col,
                "max_deviation": float(deviation[row, col]),
                "tolerance": tolerance,
                "rtol": rtol,
            },
        )

    diagonal = np.diag(array)
    if (diagonal < 0).any():
        item = int(np.argmax(diagonal < 0))
        raise CovarianceMatrixError(
            "Item variances must be non-negative",
            context={"item": item, "variance": float(diagonal[item])},
        )

    logger.debug("Validated covariance matrix", extra={"n_items": n_rows})


def as_covariance_matrix(
    matrix: Union[CovarianceMatrix, "ArrayLike"],
) -> CovarianceMatrix:
    """
    Coerce the input to a CovarianceMatrix.

    CovarianceMatrix instances are returned unchanged; anything else is
    converted and validated.
    """
    if isinstance(matrix, CovarianceMatrix):
        return matrix
    return CovarianceMatrix(matrix)
