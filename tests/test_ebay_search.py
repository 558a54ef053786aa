"""Unit tests for the eBay search gateway."""

from unittest.mock import AsyncMock

import httpx
import pytest

from result_cache import ResultCache
from services.ebay_auth import EbayTokenProvider
from services.ebay_search import EbaySearchGateway, extract_error_message
from services.exceptions import (
    MissingCredentialsError,
    UpstreamSearchError,
    UpstreamUnavailableError,
)

pytestmark = pytest.mark.unit

SEARCH_RESPONSE = {
    "total": 1,
    "itemSummaries": [
        {"itemId": "v1|1|0", "title": "Vintage Levi's Trucker Jacket", "price": {"value": "45.00", "currency": "USD"}}
    ],
}


@pytest.fixture
def http_client():
    client = AsyncMock()
    client.get.return_value = httpx.Response(status_code=200, json=SEARCH_RESPONSE)
    return client


@pytest.fixture
def gateway(http_client):
    return EbaySearchGateway(
        http_client=http_client,
        token_provider=EbayTokenProvider(http_client, "https://api.ebay.com/identity/v1/oauth2/token",
                                         static_token="tok"),
        cache=ResultCache(default_ttl=300),
        api_base="https://api.ebay.com",
        app_id="my-app-id",
    )


class TestSearch:

    @pytest.mark.asyncio
    async def test_search_request(self, gateway, http_client):
        result = await gateway.search("levis jacket", "gb", {"category_ids": "11450", "limit": 200})

        assert result == SEARCH_RESPONSE
        call_args = http_client.get.call_args
        assert call_args[0][0] == "https://api.ebay.com/buy/browse/v1/item_summary/search"
        assert call_args[1]["headers"]["Authorization"] == "Bearer tok"
        assert call_args[1]["headers"]["X-EBAY-C-MARKETPLACE-ID"] == "EBAY_GB"
        assert call_args[1]["params"] == {"q": "levis jacket", "category_ids": "11450", "limit": "200"}

    @pytest.mark.asyncio
    async def test_second_search_served_from_cache(self, gateway, http_client):
        await gateway.search("levis jacket", "US", {"limit": 200})
        await gateway.search("levis jacket", "US", {"limit": 200})

        assert http_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_different_params_miss_cache(self, gateway, http_client):
        await gateway.search("levis jacket", "US", {"limit": 200})
        await gateway.search("levis jacket", "US", {"limit": 200, "sort": "price"})

        assert http_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_query_omits_q(self, gateway, http_client):
        await gateway.search("", "US", {"gtin": "0885178960154"})

        assert http_client.get.call_args[1]["params"] == {"gtin": "0885178960154"}

    @pytest.mark.asyncio
    async def test_error_status_raises_with_upstream_message(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(
            status_code=400,
            json={"errors": [{"errorId": 12001, "message": "The 'limit' value should be between 1 and 200"}]},
        )

        with pytest.raises(UpstreamSearchError) as exc_info:
            await gateway.search("jacket", "US", {"limit": 500})

        assert exc_info.value.message == "The 'limit' value should be between 1 and 200"
        assert len(gateway.cache) == 0

    @pytest.mark.asyncio
    async def test_network_error(self, gateway, http_client):
        http_client.get.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(UpstreamUnavailableError):
            await gateway.search("jacket")


class TestGetItem:

    @pytest.mark.asyncio
    async def test_item_url(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json={"itemId": "v1|9|0"})

        item = await gateway.get_item("v1|9|0")

        assert item == {"itemId": "v1|9|0"}
        assert http_client.get.call_args[0][0] == "https://api.ebay.com/buy/browse/v1/item/v1|9|0"


class TestFindCompletedItems:

    @pytest.mark.asyncio
    async def test_parses_completed_items(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json={
            "findCompletedItemsResponse": [{
                "ack": ["Success"],
                "searchResult": [{
                    "@count": "2",
                    "item": [
                        {
                            "itemId": ["111"],
                            "title": ["Vintage denim jacket"],
                            "sellingStatus": [{
                                "currentPrice": [{"@currencyId": "USD", "__value__": "42.5"}],
                                "sellingState": ["EndedWithSales"],
                            }],
                            "listingInfo": [{"endTime": ["2024-05-01T10:00:00.000Z"]}],
                        },
                        {
                            "itemId": ["222"],
                            "title": ["Vintage denim jacket XL"],
                            "sellingStatus": [{
                                "currentPrice": [{"@currencyId": "USD", "__value__": "80.0"}],
                                "sellingState": ["EndedWithoutSales"],
                            }],
                        },
                    ],
                }],
            }]
        })

        samples = await gateway.find_completed_items("denim jacket", 120)

        assert [s.item_id for s in samples] == ["111", "222"]
        assert samples[0].price == 42.5
        assert samples[0].sold is True
        assert samples[1].sold is False
        params = http_client.get.call_args[1]["params"]
        assert params["OPERATION-NAME"] == "findCompletedItems"
        assert params["SECURITY-APPNAME"] == "my-app-id"
        assert params["paginationInput.entriesPerPage"] == "120"

    @pytest.mark.asyncio
    async def test_failure_ack(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json={
            "findCompletedItemsResponse": [{
                "ack": ["Failure"],
                "errorMessage": [{"error": [{"message": ["Invalid keywords"]}]}],
            }]
        })

        with pytest.raises(UpstreamSearchError, match="Invalid keywords"):
            await gateway.find_completed_items("x")

    @pytest.mark.asyncio
    async def test_requires_app_id(self, gateway):
        gateway.app_id = None

        with pytest.raises(MissingCredentialsError):
            await gateway.find_completed_items("x")


def test_extract_error_message_plain_text():
    response = httpx.Response(status_code=503, text="Service Unavailable")
    assert extract_error_message(response) == "Service Unavailable"


class TestUnexpectedPayload:

    @pytest.mark.asyncio
    async def test_search_non_object_json(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json=["junk"])

        with pytest.raises(UpstreamUnavailableError, match="unexpected payload"):
            await gateway.search("nike dunk")

        assert len(gateway.cache) == 0

    @pytest.mark.asyncio
    async def test_completed_items_non_object_json(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json="oops")

        with pytest.raises(UpstreamUnavailableError):
            await gateway.find_completed_items("denim jacket")

    @pytest.mark.asyncio
    async def test_warning_ack_is_accepted(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(status_code=200, json={
            "findCompletedItemsResponse": [{
                "ack": ["Warning"],
                "searchResult": [{"@count": "0"}],
            }]
        })

        assert await gateway.find_completed_items("denim jacket") == []


class TestExpiredToken:

    @pytest.fixture
    def refreshing_gateway(self, http_client):
        http_client.post.return_value = httpx.Response(
            status_code=200, json={"access_token": "fresh", "expires_in": 7200}
        )
        provider = EbayTokenProvider(
            http_client,
            "https://api.ebay.com/identity/v1/oauth2/token",
            client_id="id",
            client_secret="secret",
            refresh_token="refresh",
        )
        return EbaySearchGateway(http_client=http_client, token_provider=provider, cache=ResultCache())

    @pytest.mark.asyncio
    async def test_401_refreshes_and_retries_once(self, refreshing_gateway, http_client):
        http_client.get.side_effect = [
            httpx.Response(status_code=401, json={"errors": [{"message": "Invalid access token"}]}),
            httpx.Response(status_code=200, json=SEARCH_RESPONSE),
        ]

        result = await refreshing_gateway.search("levis jacket")

        assert result == SEARCH_RESPONSE
        assert http_client.get.call_count == 2
        assert http_client.post.call_count == 2

    @pytest.mark.asyncio
    async def test_second_401_is_raised(self, refreshing_gateway, http_client):
        http_client.get.return_value = httpx.Response(
            status_code=401, json={"errors": [{"message": "Invalid access token"}]}
        )

        with pytest.raises(UpstreamSearchError, match="Invalid access token"):
            await refreshing_gateway.get_item("v1|9|0")

        assert http_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_static_token_401_not_retried(self, gateway, http_client):
        http_client.get.return_value = httpx.Response(
            status_code=401, json={"errors": [{"message": "Invalid access token"}]}
        )

        with pytest.raises(UpstreamSearchError):
            await gateway.search("jacket")

        assert http_client.get.call_count == 1
