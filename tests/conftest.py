"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so congeneric/ is importable without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from typing import Callable, List  # noqa: E402

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from congeneric.core.config import settings  # noqa: E402
from congeneric.core.reliability import CovarianceMatrix  # noqa: E402


# Loadings and unique variances of a five-item congeneric test.
# Every loading is distinct, so no off-diagonal sums tie.
CONGENERIC_LOADINGS = [0.9, 0.8, 0.7, 0.6, 0.5]
CONGENERIC_UNIQUENESSES = [0.5, 0.6, 0.7, 0.8, 0.9]


def build_congeneric_matrix(
    loadings: List[float], uniquenesses: List[float]
) -> np.ndarray:
    """Population covariance matrix λλᵀ + diag(ψ) of a congeneric test."""
    lam = np.asarray(loadings, dtype=np.float64)
    return np.outer(lam, lam) + np.diag(np.asarray(uniquenesses, dtype=np.float64))


def build_equal_covariance_matrix(
    n_items: int, variance: float = 1.0, covariance: float = 0.5
) -> np.ndarray:
    """Matrix with one common variance on the diagonal and one common covariance."""
    matrix = np.full((n_items, n_items), covariance, dtype=np.float64)
    np.fill_diagonal(matrix, variance)
    return matrix


@pytest.fixture
def example_matrix() -> CovarianceMatrix:
    """Three-item matrix with row sums [8, 9, 10] and tied off-diagonal sums."""
    return CovarianceMatrix([[4, 2, 2], [2, 5, 2], [2, 2, 6]])


@pytest.fixture
def congeneric_matrix() -> CovarianceMatrix:
    """Five-item congeneric population matrix with distinct loadings."""
    return CovarianceMatrix(
        build_congeneric_matrix(CONGENERIC_LOADINGS, CONGENERIC_UNIQUENESSES)
    )


@pytest.fixture
def equal_covariance_matrix() -> Callable[..., CovarianceMatrix]:
    """Factory for equal-variance, equal-covariance matrices."""

    def _factory(
        n_items: int, variance: float = 1.0, covariance: float = 0.5
    ) -> CovarianceMatrix:
        return CovarianceMatrix(
            build_equal_covariance_matrix(n_items, variance, covariance)
        )

    return _factory


@pytest.fixture
def corrected_method(monkeypatch):
    """Pin the item-deleted aggregation to the corrected method."""
    monkeypatch.setattr(settings, "ITEM_DELETED_METHOD", "corrected")
    return "corrected"
