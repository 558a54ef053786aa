"""
Application State Management for the Thrift Fashion Proxy

One explicitly constructed container for everything the handlers share:
the HTTP client, the token provider, the result cache, the search gateway,
the fashion classifier and the random source used for feed jitter.
It is built once per app and injected into routes.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from config import ThriftSettings
from result_cache import ResultCache
from services.ebay_auth import EbayTokenProvider
from services.ebay_search import EbaySearchGateway
from services.fashion_filter import FashionClassifier

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Shared services, constructed by `from_settings` or directly in tests."""

    settings: ThriftSettings
    http_client: httpx.AsyncClient
    token_provider: EbayTokenProvider
    cache: ResultCache
    gateway: EbaySearchGateway
    classifier: FashionClassifier
    rng: random.Random = field(default_factory=random.Random)

    # Session statistics
    stats: Dict[str, Any] = field(default_factory=lambda: {
        "total_requests": 0,
        "upstream_errors": 0,
        "session_start": datetime.now().isoformat(),
    })

    @classmethod
    def from_settings(
        cls,
        settings: ThriftSettings,
        http_client: Optional[httpx.AsyncClient] = None,
        rng: Optional[random.Random] = None,
    ) -> "AppState":
        http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        cache = ResultCache(default_ttl=settings.cache_ttl)
        token_provider = EbayTokenProvider(
            http_client=http_client,
            token_url=settings.token_url,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            refresh_token=settings.refresh_token,
            scope=settings.oauth_scope,
            static_token=settings.static_token,
        )
        gateway = EbaySearchGateway(
            http_client=http_client,
            token_provider=token_provider,
            cache=cache,
            api_base=settings.api_base,
            finding_url=settings.finding_url,
            app_id=settings.app_id,
            cache_ttl=settings.cache_ttl,
        )
        classifier = FashionClassifier(
            blocklist=settings.blocklist,
            allowlist=settings.allowlist,
            category_ids=settings.category_ids,
            use_categories=settings.use_categories,
        )
        return cls(
            settings=settings,
            http_client=http_client,
            token_provider=token_provider,
            cache=cache,
            gateway=gateway,
            classifier=classifier,
            rng=rng or random.Random(),
        )

    def increment_stat(self, key: str, amount: int = 1) -> None:
        """Safely increment a statistics counter."""
        if key in self.stats:
            self.stats[key] += amount

    def get_session_duration(self) -> float:
        """Get session duration in seconds."""
        start = datetime.fromisoformat(self.stats["session_start"])
        return (datetime.now() - start).total_seconds()

    async def aclose(self) -> None:
        await self.http_client.aclose()
        logger.info("[STATE] HTTP client closed")


# ============================================================
# FastAPI Dependency Injection Helpers
# ============================================================

def get_app_state_from_request(request: Request) -> AppState:
    """
    FastAPI dependency to get AppState from request.

    Usage in routes:
        @router.get("/endpoint")
        async def endpoint(state: AppState = Depends(get_app_state_from_request)):
            return await state.gateway.search("vintage jacket", "US")
    """
    return request.app.state.app_state
