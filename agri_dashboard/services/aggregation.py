"""
Aggregation of raw IBABI production records into ranked per-product totals.

Upstream payloads come in two envelopes: a flat ``results`` list, or the
same list nested under ``reports.harvest_reports``. Each envelope is an
extraction strategy; strategies are tried in order and the first non-empty
list wins.

Records are grouped by upper-cased product name and routed to the livestock
or harvest accumulator by ``product_type``. Quantities come from the first
present of ``target_kg``, ``kg`` and ``quantity``; anything unreadable counts
as zero and is tallied as an issue.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from agri_dashboard.schemas import HarvestEntry, LivestockEntry, SummaryTotals

DEFAULT_TOP_N = 8
UNKNOWN_PRODUCT = "UNKNOWN"
LIVESTOCK_TYPE = "livestock"

_QUANTITY_FIELDS: Tuple[str, ...] = ("target_kg", "kg", "quantity")
_NAME_FIELDS: Tuple[str, ...] = ("product_name", "product")


class UpstreamShapeError(ValueError):
    """Raised when no record list can be located in an upstream payload."""


RecordExtractor = Callable[[Any], Optional[List[Any]]]


def _dig(payload: Any, *path: str) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _flat_results(payload: Any) -> Optional[List[Any]]:
    results = _dig(payload, "results")
    return results if isinstance(results, list) else None


def _nested_harvest_results(payload: Any) -> Optional[List[Any]]:
    results = _dig(payload, "reports", "harvest_reports", "results")
    return results if isinstance(results, list) else None


RECORD_EXTRACTORS: Tuple[RecordExtractor, ...] = (
    _flat_results,
    _nested_harvest_results,
)


def extract_records(
    payload: Any, extractors: Sequence[RecordExtractor] = RECORD_EXTRACTORS
) -> List[Any]:
    """Return the first non-empty record list found by ``extractors``."""
    for extractor in extractors:
        records = extractor(payload)
        if records:
            return records
    raise UpstreamShapeError("No record list found in upstream payload")


@dataclass(slots=True)
class NormalizedRecord:
    """A raw record reduced to what aggregation needs."""

    product: str
    is_livestock: bool
    quantity: float
    has_issue: bool


@dataclass(slots=True)
class AggregationResult:
    """Ranked lists plus grand totals over every accumulated record."""

    harvest: List[HarvestEntry]
    livestock: List[LivestockEntry]
    totals: SummaryTotals


def coerce_quantity(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when unreadable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_record(raw: Dict[str, Any]) -> NormalizedRecord:
    name = next((raw.get(key) for key in _NAME_FIELDS if raw.get(key)), None)
    product = str(name).upper() if name else UNKNOWN_PRODUCT

    product_type = raw.get("product_type") or ""
    is_livestock = str(product_type).lower() == LIVESTOCK_TYPE

    raw_quantity = next(
        (raw[key] for key in _QUANTITY_FIELDS if raw.get(key) is not None), None
    )
    quantity = coerce_quantity(raw_quantity)

    return NormalizedRecord(
        product=product,
        is_livestock=is_livestock,
        quantity=quantity if quantity is not None else 0.0,
        has_issue=quantity is None,
    )


def rank_totals(totals: Dict[str, float], top_n: int) -> List[Tuple[str, float]]:
    """Sort descending by total; ``sorted`` is stable so ties keep insertion order."""
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[: max(top_n, 0)]


def aggregate_records(
    records: Iterable[Any], *, top_n: int = DEFAULT_TOP_N
) -> AggregationResult:
    """Group ``records`` by product and return the ranked top entries."""
    harvest: Dict[str, float] = {}
    livestock: Dict[str, float] = {}
    issues = 0

    for raw in records:
        if not isinstance(raw, dict):
            issues += 1
            continue
        record = normalize_record(raw)
        if record.has_issue:
            issues += 1
        bucket = livestock if record.is_livestock else harvest
        bucket[record.product] = bucket.get(record.product, 0.0) + record.quantity

    return AggregationResult(
        harvest=[
            HarvestEntry(product=product, kg=kg)
            for product, kg in rank_totals(harvest, top_n)
        ],
        livestock=[
            LivestockEntry(product=product, qty=qty)
            for product, qty in rank_totals(livestock, top_n)
        ],
        totals=SummaryTotals(
            harvest_kg=sum(harvest.values()),
            livestock_qty=sum(livestock.values()),
            issues=issues,
        ),
    )


__all__ = [
    "AggregationResult",
    "DEFAULT_TOP_N",
    "NormalizedRecord",
    "RECORD_EXTRACTORS",
    "UpstreamShapeError",
    "aggregate_records",
    "coerce_quantity",
    "extract_records",
    "normalize_record",
    "rank_totals",
]
