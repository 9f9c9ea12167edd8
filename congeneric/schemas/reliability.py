"""
Pydantic schemas for Feldt-Gilmer reliability results.

These schemas carry the numeric output of the estimator to the reporting
layer. Coefficients are plain floats and may be NaN or infinite; the
validators only enforce consistency between related fields.
"""
import math
from enum import Enum
from typing import List, Optional, Self

from pydantic import BaseModel, Field, model_validator


class ScoreReliabilityType(str, Enum):
    """Reliability estimate produced by this library."""

    FELDT_GILMER = "feldt_gilmer"


class ItemDeletedMethod(str, Enum):
    """Aggregation used for item-deleted estimates.

    - corrected: weight sums reset for every excluded item
    - legacy: historical aggregation, reproduced bit for bit (all NaN)
    """

    CORRECTED = "corrected"
    LEGACY = "legacy"


class ReliabilityInterpretation(str, Enum):
    """Interpretation of reliability coefficient values.

    The interpretation hierarchy reflects standard psychometric thresholds:
    - excellent: >= 0.90
    - good: >= 0.80
    - acceptable: >= 0.70
    - questionable: >= 0.60
    - poor: >= 0.50
    - unacceptable: < 0.50
    - undefined: NaN or infinite coefficient
    """

    EXCELLENT = "excellent"  # >= 0.90
    GOOD = "good"  # >= 0.80
    ACCEPTABLE = "acceptable"  # >= 0.70
    QUESTIONABLE = "questionable"  # >= 0.60
    POOR = "poor"  # >= 0.50
    UNACCEPTABLE = "unacceptable"  # < 0.50
    UNDEFINED = "undefined"


class ItemDeletedEstimate(BaseModel):
    """Feldt-Gilmer coefficient recomputed without a single item."""

    index: int = Field(..., ge=0, description="Item position in the covariance matrix")
    label: str = Field(..., description="Item label used in reports")
    reliability: float = Field(
        ...,
        description="Coefficient with this item removed. May be NaN or infinite.",
    )
    change: float = Field(
        ...,
        description=(
            "Item-deleted coefficient minus the overall coefficient. Positive "
            "values mean the test is more reliable without this item."
        ),
    )


class FeldtGilmerReport(BaseModel):
    """
    Structured Feldt-Gilmer result for a single covariance matrix.

    The coefficient is None only when the report was built without running
    the estimator; NaN and infinite values are reported as-is.
    """

    reliability_type: ScoreReliabilityType = ScoreReliabilityType.FELDT_GILMER
    coefficient: Optional[float] = Field(
        None,
        description="Feldt-Gilmer coefficient. NaN for fewer than three items.",
    )
    interpretation: ReliabilityInterpretation = Field(
        ...,
        description="Threshold-based interpretation of the coefficient",
    )
    meets_threshold: bool = Field(
        ...,
        description="Whether the coefficient meets the configured minimum",
    )
    num_items: int = Field(..., ge=1, description="Number of items in the matrix")
    pivot: Optional[int] = Field(
        None,
        ge=0,
        description="Pivot item index. None when fewer than three items.",
    )
    method: ItemDeletedMethod = Field(
        ...,
        description="Aggregation used for the item-deleted estimates",
    )
    item_deleted: List[ItemDeletedEstimate] = Field(
        default_factory=list,
        description="Item-deleted estimates, index-aligned with the matrix",
    )

    @model_validator(mode="after")
    def validate_meets_threshold_consistency(self) -> Self:
        """
        Ensure meets_threshold is False when the coefficient is missing or not finite.
        """
        defined = self.coefficient is not None and math.isfinite(self.coefficient)
        if self.meets_threshold and not defined:
            raise ValueError(
                "meets_threshold cannot be True when coefficient is "
                f"{self.coefficient} (no finite estimate)"
            )
        return self

    @model_validator(mode="after")
    def validate_item_alignment(self) -> Self:
        """Ensure there is one item-deleted estimate per item, in matrix order."""
        if len(self.item_deleted) != self.num_items:
            raise ValueError(
                f"item_deleted must contain {self.num_items} estimates, "
                f"got {len(self.item_deleted)}"
            )
        indices = [estimate.index for estimate in self.item_deleted]
        if indices != list(range(self.num_items)):
            raise ValueError("item_deleted estimates must be ordered by item index")
        return self
