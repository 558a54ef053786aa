"""
Sold Item Routes - price statistics from completed eBay sales

This module contains:
- /price-history   count / average / median / min / max of sold prices
- /chart-data      trailing 30 / 60 / 90 day summaries
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends

from config import CHART_PAGE_SIZE, CHART_WINDOWS_DAYS, PRICE_HISTORY_PAGE_SIZE
from services.app_state import AppState, get_app_state_from_request
from services.exceptions import MissingParameterError
from services.sold_stats import bucket_by_window, sold_prices, summarize_prices

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sold"])


@router.get("/price-history")
async def price_history(
    q: Optional[str] = None,
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Usage: /price-history?q=levis 501
    """
    if not q:
        raise MissingParameterError("q")

    samples = await state.gateway.find_completed_items(q, PRICE_HISTORY_PAGE_SIZE)
    sold = [s for s in samples if s.sold and s.price is not None]
    summary = summarize_prices(sold_prices(sold))

    logger.info(f"[SOLD] '{q}': {len(sold)}/{len(samples)} completed listings sold")
    return {
        "query": q,
        **summary,
        "sales": [s.to_dict() for s in sold],
    }


@router.get("/chart-data")
async def chart_data(
    q: Optional[str] = None,
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Usage: /chart-data?q=denim
    Each window is null when nothing sold in it.
    """
    if not q:
        raise MissingParameterError("q")

    samples = await state.gateway.find_completed_items(q, CHART_PAGE_SIZE)
    chart = bucket_by_window(samples, CHART_WINDOWS_DAYS, now=datetime.now(timezone.utc))

    return {
        "query": q,
        "total_sales": len(sold_prices(samples)),
        "chart": chart,
    }
