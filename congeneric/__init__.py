"""
Congeneric reliability: Feldt-Gilmer estimates from item covariance matrices.

Usage:
    from congeneric import evaluate, evaluate_item_deleted

    evaluate([[4, 2, 2], [2, 5, 2], [2, 2, 6]])               # 0.6667
    evaluate_item_deleted([[4, 2, 2], [2, 5, 2], [2, 2, 6]])  # array of 3
"""
from congeneric.core.reliability import (
    CovarianceMatrix,
    CovarianceMatrixError,
    feldt_gilmer as evaluate,
    feldt_gilmer_item_deleted as evaluate_item_deleted,
)

__version__ = "0.1.0"

__all__ = [
    "CovarianceMatrix",
    "CovarianceMatrixError",
    "evaluate",
    "evaluate_item_deleted",
]
