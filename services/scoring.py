"""
Feed Scoring

Ranking rules for the trending and recommendation feeds. Both add random
jitter so repeated calls shuffle near-ties; the random source is passed in
so tests can seed it.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from utils.listing_adapter import listing_price

# ============================================================
# SCORE WEIGHTS
# ============================================================

TRENDING_JITTER = 10.0

BRAND_MATCH_POINTS = 25
PRICE_PROXIMITY_MAX = 15
PRICE_PROXIMITY_SLOPE = 20
TITLE_WORD_POINTS = 2
TITLE_WORD_MIN_LENGTH = 3
RECOMMEND_JITTER = 3.0


def dedupe_by_title(listings: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop listings whose exact title was already seen (first one wins)."""
    seen = set()
    unique = []
    for item in listings:
        title = item.get("title")
        if title in seen:
            continue
        seen.add(title)
        unique.append(item)
    return unique


def trending_score(item: Dict[str, Any], rng: random.Random) -> float:
    return listing_price(item) + rng.random() * TRENDING_JITTER


def rank_trending(
    listings: Iterable[Dict[str, Any]],
    rng: random.Random,
    limit: int,
) -> List[Dict[str, Any]]:
    scored = [(trending_score(item, rng), item) for item in listings]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored[:limit]]


# ============================================================
# RECOMMENDATIONS
# ============================================================

@dataclass
class RecommendationBase:
    """The item recommendations are measured against."""
    item_id: Optional[str] = None
    title: str = ""
    brand: str = ""
    price: float = 0.0

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "RecommendationBase":
        return cls(
            item_id=item.get("itemId"),
            title=item.get("title") or "",
            brand=item.get("brand") or "",
            price=listing_price(item),
        )

    @property
    def title_words(self) -> List[str]:
        return [w for w in self.title.lower().split() if len(w) >= TITLE_WORD_MIN_LENGTH]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.item_id,
            "title": self.title or None,
            "brand": self.brand or None,
            "price": self.price,
        }


def price_proximity(base_price: float, candidate_price: float) -> float:
    """Up to 15 points, shrinking with relative price distance."""
    if base_price <= 0 or candidate_price <= 0:
        return 0.0
    ratio = abs(candidate_price - base_price) / base_price
    return max(0.0, PRICE_PROXIMITY_MAX - ratio * PRICE_PROXIMITY_SLOPE)


def similarity_score(base: RecommendationBase, item: Dict[str, Any]) -> float:
    """Deterministic part of the recommendation score."""
    score = 0.0

    brand = (item.get("brand") or "").lower()
    if base.brand and brand and brand == base.brand.lower():
        score += BRAND_MATCH_POINTS

    score += price_proximity(base.price, listing_price(item))

    candidate_title = (item.get("title") or "").lower()
    score += TITLE_WORD_POINTS * sum(1 for word in base.title_words if word in candidate_title)

    return score


def rank_recommendations(
    base: RecommendationBase,
    listings: Iterable[Dict[str, Any]],
    rng: random.Random,
    limit: int,
) -> List[Tuple[float, Dict[str, Any]]]:
    """Score candidates (excluding the base item) and return the top `limit`."""
    scored = []
    for item in listings:
        if base.item_id and item.get("itemId") == base.item_id:
            continue
        score = similarity_score(base, item) + rng.random() * RECOMMEND_JITTER
        scored.append((score, item))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return scored[:limit]
