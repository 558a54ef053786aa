"""
eBay Search Gateway

Single place where the proxy talks to eBay:
- Browse API item_summary/search (cached per marketplace + query + params)
- Browse API item detail
- Finding API findCompletedItems (legacy, array-wrapped JSON)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from result_cache import ResultCache
from services.ebay_auth import EbayTokenProvider
from services.exceptions import (
    MissingCredentialsError,
    UpstreamSearchError,
    UpstreamUnavailableError,
)
from services.marketplace import resolve_marketplace
from utils.listing_adapter import SoldItemSample, parse_completed_item

logger = logging.getLogger(__name__)


def extract_error_message(response: httpx.Response) -> str:
    """Pull eBay's error message out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] or f"eBay returned status {response.status_code}"

    if isinstance(data, dict):
        errors = data.get("errors") or data.get("error")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict):
                return first.get("longMessage") or first.get("message") or str(first)
            return str(first)
        if isinstance(errors, str):
            return data.get("error_description") or errors
        if data.get("message"):
            return data["message"]
    return f"eBay returned status {response.status_code}"


class EbaySearchGateway:
    """Browse + Finding API access with a TTL cache in front of search."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: EbayTokenProvider,
        cache: ResultCache,
        api_base: str = "https://api.ebay.com",
        finding_url: str = "https://svcs.ebay.com/services/search/FindingService/v1",
        app_id: Optional[str] = None,
        cache_ttl: int = 300,
    ):
        self.http_client = http_client
        self.token_provider = token_provider
        self.cache = cache
        self.api_base = api_base.rstrip("/")
        self.finding_url = finding_url
        self.app_id = app_id
        self.cache_ttl = cache_ttl

    @property
    def search_url(self) -> str:
        return f"{self.api_base}/buy/browse/v1/item_summary/search"

    def item_url(self, item_id: str) -> str:
        return f"{self.api_base}/buy/browse/v1/item/{item_id}"

    async def _browse_headers(self, marketplace: str) -> Dict[str, str]:
        token = await self.token_provider.get_access_token()
        return {
            "Authorization": f"Bearer {token}",
            "X-EBAY-C-MARKETPLACE-ID": marketplace,
            "Content-Type": "application/json",
        }

    async def _get_json(self, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.http_client.get(url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"[EBAY] Request to {url} failed: {e}")
            raise UpstreamUnavailableError(f"eBay request failed: {e}", cause=e) from e

        if response.status_code != 200:
            message = extract_error_message(response)
            logger.warning(f"[EBAY] API returned {response.status_code}: {message}")
            raise UpstreamSearchError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError("eBay returned invalid JSON", cause=e) from e

        if not isinstance(data, dict):
            logger.warning(f"[EBAY] Expected a JSON object from {url}, got {type(data).__name__}")
            raise UpstreamUnavailableError("eBay returned an unexpected payload")
        return data

    async def _browse_get(self, url: str, marketplace: str, **kwargs) -> Dict[str, Any]:
        """GET a Browse endpoint; on 401 drop the cached token and retry once."""
        headers = await self._browse_headers(marketplace)
        try:
            return await self._get_json(url, headers=headers, **kwargs)
        except UpstreamSearchError as e:
            if e.details.get("status_code") != 401 or not self.token_provider.can_refresh:
                raise
            logger.info("[EBAY] Access token rejected, refreshing and retrying")
            self.token_provider.invalidate()

        headers = await self._browse_headers(marketplace)
        return await self._get_json(url, headers=headers, **kwargs)

    async def search(
        self,
        query: str,
        country_code: Optional[str] = None,
        extra_params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Browse API search. Returns the raw response JSON (itemSummaries etc.),
        served from cache while the entry is fresh.
        """
        marketplace = resolve_marketplace(country_code)
        extra_params = dict(extra_params or {})
        key = self.cache.make_key(marketplace, query, extra_params)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"[CACHE] HIT {key}")
            return cached

        params = {k: str(v) for k, v in extra_params.items()}
        if query:
            params["q"] = query

        data = await self._browse_get(self.search_url, marketplace, params=params)

        logger.info(
            f"[EBAY] Search '{query}' ({marketplace}) -> {len(data.get('itemSummaries') or [])} items"
        )
        self.cache.set(key, data, self.cache_ttl)
        return data

    async def get_item(self, item_id: str, country_code: Optional[str] = None) -> Dict[str, Any]:
        """Browse API item detail (uncached)."""
        marketplace = resolve_marketplace(country_code)
        return await self._browse_get(self.item_url(item_id), marketplace)

    async def find_completed_items(self, keywords: str, entries_per_page: int = 100) -> List[SoldItemSample]:
        """
        Finding API findCompletedItems, decoded into flat samples.
        Includes unsold completed listings; callers filter on `sold`.
        """
        if not self.app_id:
            raise MissingCredentialsError("EBAY_APP_ID")

        params = {
            "OPERATION-NAME": "findCompletedItems",
            "SERVICE-VERSION": "1.13.0",
            "SECURITY-APPNAME": self.app_id,
            "RESPONSE-DATA-FORMAT": "JSON",
            "REST-PAYLOAD": "",
            "keywords": keywords,
            "paginationInput.entriesPerPage": str(entries_per_page),
            "sortOrder": "EndTimeSoonest",
        }
        data = await self._get_json(self.finding_url, params=params)

        result = (data.get("findCompletedItemsResponse") or [{}])[0]
        if (result.get("ack") or [None])[0] not in ("Success", "Warning"):
            error = ((result.get("errorMessage") or [{}])[0].get("error") or [{}])[0]
            message = (error.get("message") or ["Finding API request failed"])[0]
            logger.warning(f"[EBAY] findCompletedItems failed: {message}")
            raise UpstreamSearchError(message)

        items = (result.get("searchResult") or [{}])[0].get("item") or []
        logger.info(f"[EBAY] Completed items '{keywords}' -> {len(items)} items")
        return [parse_completed_item(item) for item in items]
