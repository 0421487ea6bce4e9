"""
Pydantic models for the production summary endpoint.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_int_or_none(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return None


class HarvestEntry(BaseModel):
    """Total harvested kilograms for one product."""

    product: str = Field(..., description="Upper-cased product name.")
    kg: float = Field(..., description="Summed harvest weight in kilograms.")


class LivestockEntry(BaseModel):
    """Total livestock production for one product."""

    product: str = Field(..., description="Upper-cased product name.")
    qty: float = Field(..., description="Summed livestock quantity.")


class SummaryTotals(BaseModel):
    """Grand totals across every aggregated record."""

    model_config = ConfigDict(populate_by_name=True)

    harvest_kg: float = Field(0.0, alias="harvestKg")
    livestock_qty: float = Field(0.0, alias="livestockQty")
    issues: int = Field(
        0, description="Records whose quantity was missing or unreadable."
    )


class SummaryQuery(BaseModel):
    """Reporting period and paging hints forwarded to the upstream API.

    Values arrive as raw query strings; anything unreadable falls back to the
    default instead of failing the request.
    """

    year: Optional[int] = None
    month: Optional[int] = None
    page: int = 1
    page_size: Optional[int] = None
    force: bool = False

    @field_validator("year", "month", mode="before")
    @classmethod
    def _coerce_optional(cls, value: object) -> Optional[int]:
        return _to_int_or_none(value)

    @field_validator("page_size", mode="before")
    @classmethod
    def _coerce_page_size(cls, value: object) -> Optional[int]:
        page_size = _to_int_or_none(value)
        return page_size if page_size and page_size > 0 else None

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value: object) -> int:
        page = _to_int_or_none(value)
        return page if page and page > 0 else 1

    @field_validator("force", mode="before")
    @classmethod
    def _coerce_force(cls, value: object) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in {"1", "true", "yes", "on"}


class SummaryResponse(BaseModel):
    """Ranked per-product totals served to the dashboard charts."""

    ok: bool = True
    harvest: List[HarvestEntry] = Field(default_factory=list)
    livestock: List[LivestockEntry] = Field(default_factory=list)
    totals: Optional[SummaryTotals] = None
    note: Optional[str] = Field(
        None, description="Set when some or all of the data is the demo dataset."
    )
