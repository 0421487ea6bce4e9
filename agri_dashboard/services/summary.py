"""
Summary service backing the dashboard charts.

Live data is read either from a pre-aggregated summary endpoint or from the
paginated raw record endpoint. Whatever goes wrong on the way, the caller
receives a well-formed ``SummaryResponse``: failures are absorbed at a single
boundary (``_with_demo_fallback``) and replaced by the demo dataset.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError

from agri_dashboard.clients import IbabiClient
from agri_dashboard.core.config import UpstreamSettings
from agri_dashboard.schemas import (
    HarvestEntry,
    LivestockEntry,
    SummaryQuery,
    SummaryResponse,
    SummaryTotals,
)
from agri_dashboard.services.aggregation import (
    aggregate_records,
    extract_records,
)

logger = logging.getLogger(__name__)

NOTE_UNCONFIGURED = "Demo data (no upstream configured)"
NOTE_UNAVAILABLE = "Demo data (upstream unavailable)"

DEMO_HARVEST: Tuple[Tuple[str, float], ...] = (
    ("Beans", 5600),
    ("Maize", 4200),
    ("Irish Potatoes", 3900),
    ("Cassava", 2800),
    ("Sorghum", 1500),
    ("Rice", 1200),
)
DEMO_LIVESTOCK: Tuple[Tuple[str, float], ...] = (
    ("Chicken", 1400),
    ("Goats", 620),
    ("Cattle", 310),
    ("Pigs", 280),
    ("Rabbits", 150),
)

EntryT = TypeVar("EntryT", HarvestEntry, LivestockEntry)


def demo_harvest() -> List[HarvestEntry]:
    return [HarvestEntry(product=product, kg=kg) for product, kg in DEMO_HARVEST]


def demo_livestock() -> List[LivestockEntry]:
    return [
        LivestockEntry(product=product, qty=qty) for product, qty in DEMO_LIVESTOCK
    ]


def demo_summary(note: str) -> SummaryResponse:
    """Return a fresh copy of the demo dataset."""
    return SummaryResponse(
        ok=True,
        harvest=demo_harvest(),
        livestock=demo_livestock(),
        totals=SummaryTotals(
            harvest_kg=sum(kg for _, kg in DEMO_HARVEST),
            livestock_qty=sum(qty for _, qty in DEMO_LIVESTOCK),
            issues=0,
        ),
        note=note,
    )


class SummaryService:
    """Build ranked harvest and livestock totals for a reporting period."""

    def __init__(self, settings: UpstreamSettings, client: IbabiClient) -> None:
        self._settings = settings
        self._client = client

    async def get_summary(self, query: SummaryQuery) -> SummaryResponse:
        if query.force:
            logger.info("Summary refresh forced for year=%s month=%s", query.year, query.month)

        if self._settings.summary_url:
            return await self._with_demo_fallback(self._from_summary_endpoint, query)
        if self._settings.data_base_url:
            return await self._with_demo_fallback(self._from_raw_records, query)

        logger.info("No upstream configured; serving demo summary")
        return demo_summary(NOTE_UNCONFIGURED)

    async def _with_demo_fallback(
        self,
        loader: Callable[[SummaryQuery], Awaitable[SummaryResponse]],
        query: SummaryQuery,
    ) -> SummaryResponse:
        try:
            return await loader(query)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "Summary upstream failed (%s: %s); serving demo data",
                exc.__class__.__name__,
                exc,
            )
            return demo_summary(NOTE_UNAVAILABLE)

    async def _from_raw_records(self, query: SummaryQuery) -> SummaryResponse:
        payload = await self._client.fetch_json(
            self._settings.data_base_url,
            params={
                "page": query.page,
                "page_size": query.page_size or self._settings.page_size,
                "year": query.year,
                "month": query.month,
            },
        )
        records = extract_records(payload)
        result = aggregate_records(records, top_n=self._settings.top_n)
        logger.info(
            "Aggregated %d records into %d harvest / %d livestock entries",
            len(records),
            len(result.harvest),
            len(result.livestock),
        )
        return SummaryResponse(
            ok=True,
            harvest=result.harvest,
            livestock=result.livestock,
            totals=result.totals,
        )

    async def _from_summary_endpoint(self, query: SummaryQuery) -> SummaryResponse:
        payload = await self._client.fetch_json(
            self._settings.summary_url,
            params={"year": query.year, "month": query.month},
        )
        if not isinstance(payload, dict):
            raise ValueError("Summary payload is not a JSON object")

        replaced: List[str] = []
        harvest = self._live_entries(payload.get("harvest"), HarvestEntry, "kg")
        if harvest is None:
            harvest = demo_harvest()
            replaced.append("harvest")
        livestock = self._live_entries(payload.get("livestock"), LivestockEntry, "qty")
        if livestock is None:
            livestock = demo_livestock()
            replaced.append("livestock")

        totals = _parse_totals(payload.get("totals"))
        if totals is None:
            totals = SummaryTotals(
                harvest_kg=sum(entry.kg for entry in harvest),
                livestock_qty=sum(entry.qty for entry in livestock),
            )

        note = None
        if replaced:
            logger.warning("Summary fields replaced with demo data: %s", replaced)
            note = f"Demo data used for: {', '.join(replaced)}"

        return SummaryResponse(
            ok=True,
            harvest=harvest,
            livestock=livestock,
            totals=totals,
            note=note,
        )

    def _live_entries(
        self, value: Any, model: Type[EntryT], total_field: str
    ) -> Optional[List[EntryT]]:
        """Validate, re-rank and truncate a pre-aggregated list; ``None`` if unusable."""
        if not isinstance(value, list):
            return None
        try:
            entries = [model.model_validate(item) for item in value]
        except ValidationError:
            return None
        ranked = sorted(
            entries, key=lambda entry: getattr(entry, total_field), reverse=True
        )
        return ranked[: self._settings.top_n]


def _parse_totals(value: Any) -> Optional[SummaryTotals]:
    if not isinstance(value, dict):
        return None
    try:
        return SummaryTotals.model_validate(value)
    except ValidationError:
        return None


__all__ = [
    "DEMO_HARVEST",
    "DEMO_LIVESTOCK",
    "SummaryService",
    "demo_summary",
]
