"""
Tests for the immutable covariance matrix value type.

Tests cover:
- Summary helpers (row sums, total variance, diagonal sum)
- Construction-time validation (shape, symmetry, variances, non-finite values)
- Immutability (defensive copy, read-only array)
- Item permutation
- Error message formatting
"""

import math

import numpy as np
import pytest

from congeneric import evaluate
from congeneric.core.reliability import (
    CovarianceMatrix,
    CovarianceMatrixError,
    as_covariance_matrix,
)


class TestSummaryHelpers:
    """Tests for row_sum(), total_variance(), and diagonal_sum()."""

    def test_row_sums_include_diagonal(self, example_matrix):
        np.testing.assert_array_equal(example_matrix.row_sums(), [8.0, 9.0, 10.0])

    def test_single_row_sum(self, example_matrix):
        assert example_matrix.row_sum(2) == 10.0

    def test_total_variance_sums_every_entry(self, example_matrix):
        # 4 + 5 + 6 + 2 * (2 + 2 + 2)
        assert example_matrix.total_variance() == 27.0

    def test_diagonal_sum(self, example_matrix):
        assert example_matrix.diagonal_sum() == 15.0

    def test_variance(self, example_matrix):
        assert example_matrix.variance(1) == 5.0

    def test_n_items_and_len(self, example_matrix):
        assert example_matrix.n_items == 3
        assert len(example_matrix) == 3

    def test_indexing(self, example_matrix):
        assert example_matrix[0, 1] == 2.0

    def test_single_item_matrix(self):
        matrix = CovarianceMatrix([[2.5]])
        assert matrix.n_items == 1
        assert matrix.total_variance() == 2.5
        assert matrix.diagonal_sum() == 2.5

    def test_negative_covariances_allowed(self):
        matrix = CovarianceMatrix([[1.0, -0.4], [-0.4, 1.0]])
        assert matrix.total_variance() == pytest.approx(1.2)


class TestValidation:
    """Tests for construction-time validation."""

    def test_rejects_non_square(self):
        with pytest.raises(CovarianceMatrixError, match="square"):
            CovarianceMatrix([[1.0, 0.5, 0.2], [0.5, 1.0, 0.3]])

    def test_rejects_one_dimensional(self):
        with pytest.raises(CovarianceMatrixError, match="two-dimensional"):
            CovarianceMatrix([1.0, 2.0, 3.0])

    def test_rejects_empty(self):
        with pytest.raises(CovarianceMatrixError, match="at least one item"):
            CovarianceMatrix(np.empty((0, 0)))

    def test_rejects_ragged_rows(self):
        with pytest.raises(CovarianceMatrixError, match="real numbers"):
            CovarianceMatrix([[1.0, 0.5], [0.5]])

    def test_rejects_non_numeric(self):
        with pytest.raises(CovarianceMatrixError, match="real numbers"):
            CovarianceMatrix([["a", "b"], ["c", "d"]])

    def test_rejects_asymmetric(self):
        with pytest.raises(CovarianceMatrixError, match="not symmetric") as exc_info:
            CovarianceMatrix([[1.0, 0.5], [0.4, 1.0]])
        assert exc_info.value.context["max_deviation"] == pytest.approx(0.1)

    def test_accepts_asymmetry_within_tolerance(self):
        matrix = CovarianceMatrix(
            [[1.0, 0.5], [0.5 + 1e-12, 1.0]], symmetry_tolerance=1e-9
        )
        assert matrix.n_items == 2

    def test_custom_tolerance_can_reject(self):
        with pytest.raises(CovarianceMatrixError):
            CovarianceMatrix(
                [[1.0, 0.5], [0.5 + 1e-6, 1.0]],
                symmetry_tolerance=1e-9,
                symmetry_rtol=0.0,
            )

    def test_accepts_rounding_asymmetry_at_large_scale(self):
        """Raw-unit covariances keep a relative tolerance on symmetry."""
        rng = np.random.default_rng(42)
        # Shared factor puts the covariances near 4e6
        factor = rng.normal(0.0, 2000.0, size=(200, 1))
        data = factor + rng.normal(0.0, 1000.0, size=(200, 4))
        cov = np.cov(data, rowvar=False)
        cov[0, 1] *= 1 + 1e-14

        matrix = CovarianceMatrix(cov)

        assert matrix.n_items == 4
        assert math.isfinite(evaluate(cov))

    def test_relative_tolerance_scales_with_entries(self):
        # Deviation of about 5e-8 is above the absolute tolerance alone
        values = [[1e6, 5e5 * (1 + 1e-13)], [5e5, 1e6]]
        assert CovarianceMatrix(values, symmetry_rtol=1e-5).n_items == 2
        with pytest.raises(CovarianceMatrixError, match="not symmetric"):
            CovarianceMatrix(values, symmetry_rtol=0.0)

    def test_rejects_real_asymmetry_at_large_scale(self):
        with pytest.raises(CovarianceMatrixError, match="not symmetric") as exc_info:
            CovarianceMatrix([[1e6, 5e5], [5.1e5, 1e6]])
        assert exc_info.value.context["rtol"] == 1e-5

    def test_rejects_negative_variance(self):
        with pytest.raises(CovarianceMatrixError, match="non-negative") as exc_info:
            CovarianceMatrix([[1.0, 0.0], [0.0, -0.5]])
        assert exc_info.value.context["item"] == 1

    def test_accepts_zero_variance(self):
        matrix = CovarianceMatrix([[0.0, 0.0], [0.0, 1.0]])
        assert matrix.variance(0) == 0.0

    @pytest.mark.parametrize("bad_value", [np.nan, np.inf, -np.inf])
    def test_rejects_non_finite_entries(self, bad_value):
        values = [[1.0, bad_value], [bad_value, 1.0]]
        with pytest.raises(CovarianceMatrixError, match="NaN or infinite"):
            CovarianceMatrix(values)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            CovarianceMatrix([[1.0, 2.0]])


class TestImmutability:
    """Tests that the matrix cannot change after construction."""

    def test_source_mutation_does_not_leak(self):
        source = np.array([[1.0, 0.5], [0.5, 1.0]])
        matrix = CovarianceMatrix(source)
        source[0, 0] = 99.0
        assert matrix[0, 0] == 1.0

    def test_values_are_read_only(self, example_matrix):
        with pytest.raises(ValueError):
            example_matrix.values[0, 0] = 10.0

    def test_no_attribute_assignment(self, example_matrix):
        with pytest.raises(AttributeError):
            example_matrix.extra = 1  # type: ignore[attr-defined]


class TestPermuted:
    """Tests for CovarianceMatrix.permuted()."""

    def test_reorders_rows_and_columns(self, example_matrix):
        permuted = example_matrix.permuted([2, 0, 1])
        np.testing.assert_array_equal(
            permuted.values,
            [[6.0, 2.0, 2.0], [2.0, 4.0, 2.0], [2.0, 2.0, 5.0]],
        )

    def test_preserves_totals(self, congeneric_matrix):
        permuted = congeneric_matrix.permuted([4, 3, 2, 1, 0])
        assert permuted.total_variance() == pytest.approx(
            congeneric_matrix.total_variance()
        )
        assert permuted.diagonal_sum() == pytest.approx(
            congeneric_matrix.diagonal_sum()
        )

    def test_permuted_matrix_is_read_only(self, example_matrix):
        permuted = example_matrix.permuted([1, 0, 2])
        with pytest.raises(ValueError):
            permuted.values[0, 0] = 1.0

    def test_rejects_invalid_order(self, example_matrix):
        with pytest.raises(CovarianceMatrixError, match="permutation"):
            example_matrix.permuted([0, 0, 1])


class TestAsCovarianceMatrix:
    """Tests for as_covariance_matrix() coercion."""

    def test_returns_instance_unchanged(self, example_matrix):
        assert as_covariance_matrix(example_matrix) is example_matrix

    def test_converts_nested_lists(self):
        matrix = as_covariance_matrix([[1, 0], [0, 1]])
        assert isinstance(matrix, CovarianceMatrix)
        assert matrix.values.dtype == np.float64

    def test_validates_converted_input(self):
        with pytest.raises(CovarianceMatrixError):
            as_covariance_matrix([[1.0, 0.2], [0.3, 1.0]])


class TestCovarianceMatrixError:
    """Tests for error message formatting."""

    def test_message_includes_context(self):
        error = CovarianceMatrixError("Bad matrix", context={"row": 1, "col": 2})
        assert str(error) == "Bad matrix (context: row=1, col=2)"

    def test_message_includes_original_error(self):
        error = CovarianceMatrixError("Bad matrix", original_error=TypeError("boom"))
        assert str(error) == "Bad matrix - caused by: boom"
        assert error.context == {}
