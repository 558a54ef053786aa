"""
Thrift Feed Routes - curated fashion listings from the Browse API

This module contains:
- /trending        seeded multi-query feed ranked by price + jitter
- /thrift-search   filtered, sorted, paginated search
- /lookup          barcode (GTIN) lookup with free-text fallback
- /recommend       similarity recommendations around a base item
- /thrift-fashion  unfiltered category search (legacy client contract)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from config import (
    SEARCH_CATEGORY_IDS,
    TRENDING_DEFAULT_LIMIT,
    TRENDING_SEED_LIMIT,
    TRENDING_SEED_QUERIES,
)
from services.app_state import AppState, get_app_state_from_request
from services.exceptions import MissingParameterError, ProxyException
from services.marketplace import resolve_marketplace
from services.scoring import (
    RecommendationBase,
    dedupe_by_title,
    rank_recommendations,
    rank_trending,
)
from utils.listing_adapter import listing_price, normalize_listing

logger = logging.getLogger(__name__)

router = APIRouter(tags=["thrift"])

SEARCH_UPSTREAM_LIMIT = 200
DEFAULT_RECOMMEND_QUERY = "vintage jacket"
LEGACY_QUERY_SUFFIX = "fashion thrift vintage streetwear"

# Client sort value -> Browse API sort parameter
UPSTREAM_SORT = {
    "price_low": "price",
    "price_high": "-price",
    "newest": "newlyListed",
}


def _summaries(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    return response.get("itemSummaries") or []


def _normalized(listings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_listing(item).to_dict() for item in listings]


def sort_listings(listings: List[Dict[str, Any]], sort: Optional[str]) -> List[Dict[str, Any]]:
    """Sort by price (either direction) or newest first; anything else keeps upstream order."""
    if sort == "price_low":
        return sorted(listings, key=listing_price)
    if sort == "price_high":
        return sorted(listings, key=listing_price, reverse=True)
    if sort == "newest":
        return sorted(listings, key=lambda item: item.get("itemCreationDate") or "", reverse=True)
    return list(listings)


# ============================================================
# TRENDING
# ============================================================

@router.get("/trending")
async def trending(
    limit: int = Query(TRENDING_DEFAULT_LIMIT, ge=1, le=200),
    country: str = "US",
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Pool results of the seed queries, keep fashion items, drop duplicate
    titles and rank by price plus random jitter.
    Usage: /trending?limit=40&country=GB
    """
    pooled: List[Dict[str, Any]] = []
    failed = 0

    # One upstream call at a time
    for seed in TRENDING_SEED_QUERIES:
        try:
            response = await state.gateway.search(
                seed,
                country,
                {"category_ids": SEARCH_CATEGORY_IDS, "limit": TRENDING_SEED_LIMIT},
            )
        except ProxyException as e:
            failed += 1
            state.increment_stat("upstream_errors")
            logger.warning(f"[TRENDING] Seed '{seed}' failed, skipping: {e}")
            continue
        pooled.extend(_summaries(response))

    fashion = dedupe_by_title(state.classifier.filter(pooled))
    ranked = rank_trending(fashion, state.rng, limit)

    logger.info(
        f"[TRENDING] {len(pooled)} pooled, {len(fashion)} fashion, "
        f"{len(ranked)} returned ({failed} seeds failed)"
    )
    return {"count": len(ranked), "items": _normalized(ranked)}


# ============================================================
# SEARCH
# ============================================================

@router.get("/thrift-search")
async def thrift_search(
    q: Optional[str] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    country: str = "US",
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Usage: /thrift-search?q=jacket&sort=price_low&page=2&limit=20
    sort: price_low | price_high | newest
    """
    if not q:
        raise MissingParameterError("q")

    params: Dict[str, Any] = {"category_ids": SEARCH_CATEGORY_IDS, "limit": SEARCH_UPSTREAM_LIMIT}
    if sort in UPSTREAM_SORT:
        params["sort"] = UPSTREAM_SORT[sort]

    response = await state.gateway.search(q, country, params)
    listings = sort_listings(state.classifier.filter(_summaries(response)), sort)

    start = (page - 1) * limit
    page_items = listings[start:start + limit]

    return {
        "query": q,
        "sort": sort,
        "page": page,
        "limit": limit,
        "total": len(listings),
        "count": len(page_items),
        "items": _normalized(page_items),
    }


# ============================================================
# BARCODE LOOKUP
# ============================================================

@router.get("/lookup")
async def lookup(
    code: Optional[str] = None,
    country: str = "US",
    state: AppState = Depends(get_app_state_from_request),
):
    """
    GTIN lookup; when no fashion listing matches the barcode, retry the code
    as free text and flag the response with fallback=true.
    Usage: /lookup?code=0885178960154
    """
    if not code:
        raise MissingParameterError("code")

    response = await state.gateway.search("", country, {"gtin": code, "limit": 50})
    listings = state.classifier.filter(_summaries(response))
    fallback = False

    if not listings:
        logger.info(f"[LOOKUP] No GTIN match for {code}, falling back to text search")
        response = await state.gateway.search(code, country, {"limit": 50})
        listings = state.classifier.filter(_summaries(response))
        fallback = True

    return {
        "code": code,
        "fallback": fallback,
        "count": len(listings),
        "items": _normalized(listings),
    }


# ============================================================
# RECOMMENDATIONS
# ============================================================

@router.get("/recommend")
async def recommend(
    item_id: Optional[str] = None,
    q: Optional[str] = None,
    limit: int = Query(20, ge=1, le=200),
    country: str = "US",
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Similar listings around an optional base item.
    Usage: /recommend?item_id=v1|1234|0&limit=10
    """
    base = RecommendationBase()
    if item_id:
        detail = await state.gateway.get_item(item_id, country)
        base = RecommendationBase.from_item(detail)
        base.item_id = base.item_id or item_id

    query = q or f"{base.brand} {base.title}".strip() or DEFAULT_RECOMMEND_QUERY

    response = await state.gateway.search(
        query,
        country,
        {"category_ids": SEARCH_CATEGORY_IDS, "limit": SEARCH_UPSTREAM_LIMIT},
    )
    candidates = state.classifier.filter(_summaries(response))
    ranked = rank_recommendations(base, candidates, state.rng, limit)

    items = []
    for score, item in ranked:
        entry = normalize_listing(item).to_dict()
        entry["score"] = round(score, 2)
        items.append(entry)

    return {
        "base": base.to_dict() if item_id else None,
        "query": query,
        "count": len(items),
        "items": items,
    }


# ============================================================
# LEGACY CATEGORY SEARCH
# ============================================================

@router.get("/thrift-fashion")
async def thrift_fashion(
    q: Optional[str] = None,
    code: Optional[str] = None,
    country: str = "US",
    state: AppState = Depends(get_app_state_from_request),
):
    """
    Category-restricted search without the fashion classifier.
    Usage: /thrift-fashion?q=levis or /thrift-fashion?code=0885178960154
    """
    if not q and not code:
        raise MissingParameterError("q", "Parameter 'q' (product name) or 'code' (barcode) is required")

    query_text = f"gtin:{code}" if code else f"{q} {LEGACY_QUERY_SUFFIX}"
    marketplace = resolve_marketplace(country)

    response = await state.gateway.search(
        query_text,
        country,
        {"category_ids": SEARCH_CATEGORY_IDS, "limit": 20},
    )
    items = _normalized(_summaries(response))

    return {
        "query_used": query_text,
        "country": country,
        "marketplace": marketplace,
        "result_count": len(items),
        "items": items,
    }
