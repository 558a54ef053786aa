"""
Fashion Filter

Rule-based check that decides whether a Browse API listing belongs in the
thrift feed. Plain substring matching on the lowercased title:

    1. No title                       -> reject
    2. Any blocklist term in title    -> reject (wins over everything else)
    3. Any allowlist term in title    -> accept
    4. Category id in fashion list    -> accept (only when use_categories)
    5. Otherwise                      -> reject
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from config import FASHION_ALLOWLIST, FASHION_BLOCKLIST, FASHION_CATEGORY_IDS

logger = logging.getLogger(__name__)


def listing_category_ids(listing: Dict[str, Any]) -> List[str]:
    """Collect category ids from the shapes the Browse API uses."""
    ids = []
    for category in listing.get("categories") or []:
        category_id = category.get("categoryId") if isinstance(category, dict) else category
        if category_id:
            ids.append(str(category_id))
    for key in ("categoryIds", "leafCategoryIds"):
        ids.extend(str(c) for c in listing.get(key) or [])
    if listing.get("categoryId"):
        ids.append(str(listing["categoryId"]))
    return ids


class FashionClassifier:
    """Two-list substring classifier with an optional category allowlist."""

    def __init__(
        self,
        blocklist: Optional[Sequence[str]] = None,
        allowlist: Optional[Sequence[str]] = None,
        category_ids: Optional[Iterable[str]] = None,
        use_categories: bool = True,
    ):
        self.blocklist = [term.lower() for term in (blocklist if blocklist is not None else FASHION_BLOCKLIST)]
        self.allowlist = [term.lower() for term in (allowlist if allowlist is not None else FASHION_ALLOWLIST)]
        self.category_ids = set(category_ids if category_ids is not None else FASHION_CATEGORY_IDS)
        self.use_categories = use_categories

    def blocked_term(self, title: str) -> Optional[str]:
        lowered = title.lower()
        for term in self.blocklist:
            if term in lowered:
                return term
        return None

    def is_fashion(self, listing: Dict[str, Any]) -> bool:
        title = listing.get("title")
        if not title:
            return False

        if self.blocked_term(title):
            return False

        lowered = title.lower()
        if any(term in lowered for term in self.allowlist):
            return True

        if self.use_categories:
            return any(cid in self.category_ids for cid in listing_category_ids(listing))

        return False

    def filter(self, listings: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Keep fashion listings, preserving upstream order."""
        listings = list(listings)
        kept = [item for item in listings if self.is_fashion(item)]
        logger.debug(f"[FASHION] Kept {len(kept)}/{len(listings)} listings")
        return kept
