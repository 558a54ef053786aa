"""Unit tests for trending / recommendation scoring."""

import random

import pytest

from services.scoring import (
    RecommendationBase,
    dedupe_by_title,
    price_proximity,
    rank_recommendations,
    rank_trending,
    similarity_score,
)
from tests.factories import make_listing

pytestmark = pytest.mark.unit


def test_dedupe_keeps_first_occurrence():
    listings = [
        make_listing("1", "Vintage jacket", 10),
        make_listing("2", "Vintage jacket", 99),
        make_listing("3", "vintage jacket", 5),
    ]
    assert [l["itemId"] for l in dedupe_by_title(listings)] == ["1", "3"]


def test_rank_trending_orders_by_price_beyond_jitter():
    listings = [make_listing(str(p), f"item {p}", p) for p in (5, 100, 50)]

    ranked = rank_trending(listings, random.Random(0), limit=2)

    assert [l["itemId"] for l in ranked] == ["100", "50"]


def test_rank_trending_is_reproducible_with_seed():
    listings = [make_listing(str(i), f"item {i}", 20 + (i % 3)) for i in range(10)]

    first = rank_trending(listings, random.Random(42), limit=10)
    second = rank_trending(listings, random.Random(42), limit=10)

    assert first == second


class TestPriceProximity:

    def test_same_price_is_max(self):
        assert price_proximity(50, 50) == 15

    def test_scaled_by_ratio(self):
        # ratio 0.25 -> 15 - 5
        assert price_proximity(40, 50) == pytest.approx(10)

    def test_floor_at_zero(self):
        assert price_proximity(10, 100) == 0

    def test_zero_prices_contribute_nothing(self):
        assert price_proximity(0, 50) == 0
        assert price_proximity(50, 0) == 0


class TestSimilarity:

    @pytest.fixture
    def base(self):
        return RecommendationBase(item_id="base", title="Levi's 501 vintage jeans", brand="Levi's", price=50)

    def test_brand_price_and_title_words(self, base):
        item = make_listing("x", "levi's 501 jeans", 50, brand="LEVI'S")
        # brand 25 + price 15 + words ("levi's", "501", "jeans") 6
        assert similarity_score(base, item) == pytest.approx(46)

    def test_short_words_ignored(self):
        base = RecommendationBase(title="a ok top", price=0)
        assert base.title_words == ["top"]

    def test_base_item_excluded_and_ranked(self, base):
        candidates = [
            make_listing("base", "Levi's 501 vintage jeans", 50, brand="Levi's"),
            make_listing("far", "Wrangler jeans", 300, brand="Wrangler"),
            make_listing("near", "Levi's 501 jeans blue", 48, brand="Levi's"),
        ]

        ranked = rank_recommendations(base, candidates, random.Random(3), limit=10)

        assert [item["itemId"] for _, item in ranked] == ["near", "far"]
