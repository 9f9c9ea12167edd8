"""
Pydantic schemas for reliability results.
"""
from congeneric.schemas.reliability import (
    FeldtGilmerReport,
    ItemDeletedEstimate,
    ItemDeletedMethod,
    ReliabilityInterpretation,
    ScoreReliabilityType,
)

__all__ = [
    "FeldtGilmerReport",
    "ItemDeletedEstimate",
    "ItemDeletedMethod",
    "ReliabilityInterpretation",
    "ScoreReliabilityType",
]
