"""Spool usage report route."""

import logging
from collections.abc import Mapping

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from backend.app.core.config import DEFAULT_SPOOL_ROSTER, settings
from backend.app.services.moonraker import (
    HistoryTimeoutError,
    HistoryTransportError,
    MoonrakerHistoryClient,
    get_history_client,
    init_history_client,
)
from backend.app.services.usage_report import generate_usage_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["report"])


async def history_client() -> MoonrakerHistoryClient:
    """Return the shared history client, creating it on first use."""
    client = await get_history_client()
    if not client:
        client = await init_history_client(settings.history_base_url, timeout=settings.history_timeout)
    return client


def get_spool_roster() -> Mapping[str, float]:
    return DEFAULT_SPOOL_ROSTER


@router.get("/", response_class=PlainTextResponse)
async def get_usage_report(
    client: MoonrakerHistoryClient = Depends(history_client),
    roster: Mapping[str, float] = Depends(get_spool_roster),
):
    """Render remaining filament per spool as a plain-text table."""
    try:
        return await generate_usage_report(
            client,
            roster,
            start=settings.history_start,
            order=settings.history_order,
        )
    except HistoryTimeoutError as e:
        logger.error("Usage report failed: %s", e)
        raise HTTPException(status_code=504, detail=str(e))
    except HistoryTransportError as e:
        logger.error("Usage report failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
