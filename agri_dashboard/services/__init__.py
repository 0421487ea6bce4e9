"""Service layer exports."""

from .aggregation import AggregationResult, UpstreamShapeError, aggregate_records
from .prediction import PredictionService
from .summary import SummaryService

__all__ = [
    "AggregationResult",
    "PredictionService",
    "SummaryService",
    "UpstreamShapeError",
    "aggregate_records",
]
