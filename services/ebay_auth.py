"""
eBay OAuth Token Provider

Hands out a bearer token for the Browse API. The token is obtained with the
refresh-token grant (client id/secret via HTTP Basic) and cached on the
instance until 60 seconds before eBay says it expires.

When only a static EBAY_TOKEN is configured, that token is returned as-is.
"""

import base64
import logging
import time
from typing import Callable, Optional

import httpx

from services.exceptions import (
    MissingCredentialsError,
    UpstreamAuthError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

EXPIRY_MARGIN_SECONDS = 60
DEFAULT_EXPIRES_IN = 7200  # eBay user tokens last 2 hours


class EbayTokenProvider:
    """Cached eBay access token with refresh-before-expiry."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_url: str,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        scope: Optional[str] = None,
        static_token: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.http_client = http_client
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.scope = scope
        self.static_token = static_token
        self._clock = clock

        self._access_token: Optional[str] = None
        self._expires_at: float = 0.0
        self.refresh_count = 0

    @property
    def can_refresh(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)

    @property
    def has_valid_token(self) -> bool:
        return self._access_token is not None and self._clock() < self._expires_at

    @property
    def token_available(self) -> bool:
        """A request could be authorized right now without a refresh."""
        if not self.can_refresh:
            return bool(self.static_token)
        return self.has_valid_token

    def invalidate(self) -> None:
        """Forget the cached token so the next call refreshes."""
        self._access_token = None
        self._expires_at = 0.0

    async def get_access_token(self) -> str:
        """
        Return a token that has not passed its expiry.
        Refreshes synchronously (within this request) when needed.
        """
        if not self.can_refresh:
            if self.static_token:
                return self.static_token
            raise MissingCredentialsError("EBAY_REFRESH_TOKEN")

        if self.has_valid_token:
            return self._access_token

        return await self._refresh()

    def _basic_auth_header(self) -> str:
        credentials = f"{self.client_id}:{self.client_secret}"
        return "Basic " + base64.b64encode(credentials.encode()).decode()

    async def _refresh(self) -> str:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": self._basic_auth_header(),
        }
        data = {
            "grant_type": "refresh_token",
            "refresh_token": self.refresh_token,
        }
        if self.scope:
            data["scope"] = self.scope

        issued_at = self._clock()
        try:
            response = await self.http_client.post(self.token_url, headers=headers, data=data)
        except httpx.RequestError as e:
            logger.error(f"[EBAY OAuth] Token request failed with network error: {e}")
            raise UpstreamUnavailableError(f"eBay token endpoint unreachable: {e}", cause=e) from e

        try:
            token_data = response.json()
        except ValueError:
            token_data = {}

        if response.status_code != 200:
            message = (
                token_data.get("error_description")
                or token_data.get("error")
                or f"Token request failed with status {response.status_code}"
            )
            logger.error(f"[EBAY OAuth] Token request failed: {response.status_code} - {message}")
            raise UpstreamAuthError(message, status_code=response.status_code)

        access_token = token_data.get("access_token")
        if not access_token:
            message = token_data.get("error_description") or "No access_token in response"
            logger.error(f"[EBAY OAuth] {message}")
            raise UpstreamAuthError(message, status_code=response.status_code)

        expires_in = int(token_data.get("expires_in", DEFAULT_EXPIRES_IN))
        self._access_token = access_token
        self._expires_at = issued_at + expires_in - EXPIRY_MARGIN_SECONDS
        self.refresh_count += 1
        logger.info(f"[EBAY OAuth] Token acquired, expires in {expires_in}s")
        return access_token
