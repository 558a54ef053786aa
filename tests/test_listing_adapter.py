"""Unit tests for the listing adapter and marketplace resolver."""

from datetime import datetime, timezone

import pytest

from services.marketplace import resolve_marketplace
from utils.listing_adapter import normalize_listing, parse_completed_item, parse_price

pytestmark = pytest.mark.unit


class TestNormalizeListing:

    def test_full_listing(self):
        item = {
            "itemId": "v1|123|0",
            "title": "Vintage Nike Windbreaker",
            "price": {"value": "34.99", "currency": "USD"},
            "condition": "Pre-owned",
            "brand": "Nike",
            "seller": {"username": "retro_rack"},
            "thumbnailImages": [{"imageUrl": "https://i.ebayimg.com/thumb.jpg"}],
            "image": {"imageUrl": "https://i.ebayimg.com/full.jpg"},
            "itemWebUrl": "https://www.ebay.com/itm/123",
            "authenticityGuarantee": {"eligible": True},
        }

        assert normalize_listing(item).to_dict() == {
            "id": "v1|123|0",
            "title": "Vintage Nike Windbreaker",
            "price": 34.99,
            "currency": "USD",
            "image": "https://i.ebayimg.com/thumb.jpg",
            "url": "https://www.ebay.com/itm/123",
            "condition": "Pre-owned",
            "brand": "Nike",
            "seller": "retro_rack",
            "authenticity": "Guaranteed",
        }

    def test_missing_fields_are_explicit_none(self):
        result = normalize_listing({"itemId": "v1|1|0", "title": "Denim skirt"}).to_dict()

        for key in ("price", "currency", "image", "url", "condition", "brand", "seller"):
            assert key in result
            assert result[key] is None
        assert result["authenticity"] == "Not guaranteed"

    def test_image_fallback(self):
        result = normalize_listing({"image": {"imageUrl": "https://i.ebayimg.com/full.jpg"}})
        assert result.image == "https://i.ebayimg.com/full.jpg"


class TestParseCompletedItem:

    def test_unwraps_arrays(self):
        sample = parse_completed_item({
            "itemId": ["555"],
            "title": ["Levi's 501 vintage"],
            "viewItemURL": ["https://www.ebay.com/itm/555"],
            "galleryURL": ["https://thumbs.ebaystatic.com/555.jpg"],
            "condition": [{"conditionDisplayName": ["Pre-owned"]}],
            "sellingStatus": [{
                "currentPrice": [{"@currencyId": "USD", "__value__": "61.0"}],
                "sellingState": ["EndedWithSales"],
            }],
            "listingInfo": [{"endTime": ["2024-05-01T10:00:00.000Z"]}],
        })

        assert sample.item_id == "555"
        assert sample.price == 61.0
        assert sample.currency == "USD"
        assert sample.condition == "Pre-owned"
        assert sample.sold is True
        assert sample.end_time == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert sample.to_dict()["ended"] == "2024-05-01T10:00:00+00:00"

    def test_sparse_item(self):
        sample = parse_completed_item({"itemId": ["1"]})
        assert sample.price is None
        assert sample.end_time is None
        assert sample.sold is False


@pytest.mark.parametrize("raw,expected", [
    ("12.50", 12.5),
    ("$1,200.00", 1200.0),
    (None, None),
    ("", None),
    ("n/a", None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.parametrize("code,expected", [
    ("US", "EBAY_US"),
    ("gb", "EBAY_GB"),
    ("UK", "EBAY_GB"),
    ("ph", "EBAY_PH"),
    ("ZZ", "EBAY_US"),
    ("", "EBAY_US"),
    (None, "EBAY_US"),
])
def test_resolve_marketplace(code, expected):
    assert resolve_marketplace(code) == expected
