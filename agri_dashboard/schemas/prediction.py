"""
Pydantic models for yield prediction requests.
"""

import math
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PredictionRequest(BaseModel):
    """Crop or livestock attributes submitted from the prediction panel.

    The body is forwarded to the model service as received, so unknown keys
    are kept and numeric fields are only coerced, never rejected.
    """

    model_config = ConfigDict(extra="allow")

    product_name: Optional[str] = None
    product_type: Optional[str] = None
    district: Optional[str] = None
    sector: Optional[str] = None
    cell: Optional[str] = None
    village: Optional[str] = None
    land_size_ha: float = Field(0.0, description="Cultivated land in hectares.")
    year: int = 0
    month: float = Field(
        0.0, description="Calendar month; fractional values pass through as sent."
    )

    @field_validator("land_size_ha", "month", mode="before")
    @classmethod
    def _coerce_float(cls, value: object) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_int(cls, value: object) -> int:
        if value is None or isinstance(value, bool):
            return 0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        return int(number) if math.isfinite(number) else 0

    @field_validator(
        "product_name", "product_type", "district", "sector", "cell", "village",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        return str(value)


class PredictionResult(BaseModel):
    """Response envelope for the prediction endpoint."""

    ok: bool
    predicted_kg: Optional[Union[int, float]] = None
    note: Optional[str] = None
    error: Optional[str] = None
