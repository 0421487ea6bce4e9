"""Public schema exports."""

from .prediction import PredictionRequest, PredictionResult
from .summary import (
    HarvestEntry,
    LivestockEntry,
    SummaryQuery,
    SummaryResponse,
    SummaryTotals,
)

__all__ = [
    "HarvestEntry",
    "LivestockEntry",
    "PredictionRequest",
    "PredictionResult",
    "SummaryQuery",
    "SummaryResponse",
    "SummaryTotals",
]
