"""
Listing Adapter - Normalizes eBay payloads for the client

This module provides the single normalization layer between eBay and the
client feed, and decodes the Finding API's array-wrapped records once at
the boundary so no business logic has to index into `[0]` wrappers.

ARCHITECTURE:
    Browse itemSummary  ─► NormalizedListing ─► JSON feed
    Finding item        ─► SoldItemSample    ─► price statistics

FIELD MAPPING (NormalizedListing):
    id              itemId
    title           title
    price           price.value (float)
    currency        price.currency
    image           thumbnailImages[0].imageUrl / image.imageUrl
    url             itemWebUrl
    condition       condition
    brand           brand
    seller          seller.username
    authenticity    authenticityGuarantee (Guaranteed / Not guaranteed)

FIELD MAPPING (SoldItemSample):
    item_id         itemId[0]
    title           title[0]
    price           sellingStatus[0].currentPrice[0].__value__
    currency        sellingStatus[0].currentPrice[0].@currencyId
    selling_state   sellingStatus[0].sellingState[0]
    condition       condition[0].conditionDisplayName[0]
    end_time        listingInfo[0].endTime[0]
    url             viewItemURL[0]
    image           galleryURL[0]
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SOLD_STATE = "EndedWithSales"


def parse_price(value: Any) -> Optional[float]:
    """Parse an eBay price string; None when absent or unparseable."""
    if value is None or value == "":
        return None
    try:
        return float(str(value).replace('$', '').replace(',', '').strip())
    except (ValueError, TypeError):
        return None


def listing_price(item: Dict[str, Any]) -> float:
    """Numeric price of a raw Browse listing, 0.0 when unknown."""
    return parse_price((item.get("price") or {}).get("value")) or 0.0


def parse_ebay_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse eBay ISO timestamps like 2024-05-01T10:00:00.000Z as aware UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"[ADAPTER] Unparseable timestamp: {value}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ============================================================
# BROWSE API LISTINGS
# ============================================================

@dataclass(frozen=True)
class NormalizedListing:
    """Stable subset of a Browse listing, renamed for the client."""
    id: Optional[str]
    title: Optional[str]
    price: Optional[float]
    currency: Optional[str]
    image: Optional[str]
    url: Optional[str]
    condition: Optional[str]
    brand: Optional[str]
    seller: Optional[str]
    authenticity: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _image_url(item: Dict[str, Any]) -> Optional[str]:
    thumbnails = item.get("thumbnailImages") or []
    if thumbnails and thumbnails[0].get("imageUrl"):
        return thumbnails[0]["imageUrl"]
    return (item.get("image") or {}).get("imageUrl") or None


def normalize_listing(item: Dict[str, Any]) -> NormalizedListing:
    """Project a Browse itemSummary (or item detail) into the feed shape."""
    price = item.get("price") or {}
    guarantee = item.get("authenticityGuarantee") or {}
    return NormalizedListing(
        id=item.get("itemId") or None,
        title=item.get("title") or None,
        price=parse_price(price.get("value")),
        currency=price.get("currency") or None,
        image=_image_url(item),
        url=item.get("itemWebUrl") or None,
        condition=item.get("condition") or None,
        brand=item.get("brand") or None,
        seller=(item.get("seller") or {}).get("username") or None,
        authenticity="Guaranteed" if guarantee.get("eligible") else "Not guaranteed",
    )


# ============================================================
# FINDING API COMPLETED ITEMS
# ============================================================

def _first(value: Any, default: Any = None) -> Any:
    """Unwrap the Finding API's single-element arrays."""
    if isinstance(value, list):
        return value[0] if value else default
    return default if value is None else value


@dataclass(frozen=True)
class SoldItemSample:
    """Flat view of one Finding API completed listing."""
    item_id: Optional[str]
    title: Optional[str]
    price: Optional[float]
    currency: Optional[str]
    condition: Optional[str]
    end_time: Optional[datetime]
    url: Optional[str]
    image: Optional[str]
    selling_state: Optional[str]

    @property
    def sold(self) -> bool:
        return self.selling_state == SOLD_STATE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.item_id,
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "condition": self.condition,
            "ended": self.end_time.isoformat() if self.end_time else None,
            "url": self.url,
            "image": self.image,
        }


def parse_completed_item(item: Dict[str, Any]) -> SoldItemSample:
    """Decode an array-wrapped Finding API item into a SoldItemSample."""
    selling_status = _first(item.get("sellingStatus"), {}) or {}
    current_price = _first(selling_status.get("currentPrice"), {}) or {}
    condition = _first(item.get("condition"), {}) or {}
    listing_info = _first(item.get("listingInfo"), {}) or {}

    return SoldItemSample(
        item_id=_first(item.get("itemId")),
        title=_first(item.get("title")),
        price=parse_price(current_price.get("__value__")),
        currency=current_price.get("@currencyId"),
        condition=_first(condition.get("conditionDisplayName")),
        end_time=parse_ebay_datetime(_first(listing_info.get("endTime"))),
        url=_first(item.get("viewItemURL")),
        image=_first(item.get("galleryURL")),
        selling_state=_first(selling_status.get("sellingState")),
    )
