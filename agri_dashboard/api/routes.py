"""
FastAPI routes for the agricultural dashboard.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from agri_dashboard.dependencies import get_prediction_service, get_summary_service
from agri_dashboard.schemas import PredictionResult, SummaryQuery, SummaryResponse
from agri_dashboard.services import PredictionService, SummaryService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get(
    "/summary",
    status_code=HTTPStatus.OK,
    response_model=SummaryResponse,
    response_model_exclude_none=True,
)
async def get_summary(
    service: Annotated[SummaryService, Depends(get_summary_service)],
    year: str | None = Query(default=None, description="Reporting year filter."),
    month: str | None = Query(default=None, description="Reporting month filter."),
    page: str | None = Query(default=None, description="Upstream page number."),
    page_size: str | None = Query(
        default=None,
        alias="pageSize",
        description="Upstream page size hint.",
    ),
    force: str | None = Query(
        default=None,
        description="Accepted for compatibility; summaries are never cached.",
    ),
) -> SummaryResponse:
    """
    Return ranked harvest and livestock totals, falling back to demo data.

    Parameters are read as raw strings so malformed values degrade to defaults
    rather than producing a validation error.
    """
    query = SummaryQuery(
        year=year,
        month=month,
        page=page,
        page_size=page_size,
        force=force,
    )
    return await service.get_summary(query)


@router.post("/predict", response_model=PredictionResult)
async def predict_yield(
    request: Request,
    service: Annotated[PredictionService, Depends(get_prediction_service)],
) -> JSONResponse:
    """Forward a prediction request to the model service or return a demo value."""
    try:
        payload = await request.json()
        status_code, result = await service.predict(payload)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Prediction request failed")
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": str(exc) or exc.__class__.__name__},
        )

    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(exclude_none=True),
    )
