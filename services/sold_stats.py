"""
Sold Item Statistics

Aggregates over completed eBay sales: count / average / median / min / max
for the price history endpoint, and trailing day-window buckets for the
chart endpoint.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from utils.listing_adapter import SoldItemSample


def median(values: Sequence[float]) -> Optional[float]:
    """Middle value; mean of the two middle values for even counts."""
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def sold_prices(samples: Iterable[SoldItemSample]) -> List[float]:
    return [s.price for s in samples if s.sold and s.price is not None]


def summarize_prices(prices: Sequence[float], include_median: bool = True) -> Dict[str, Optional[float]]:
    """
    Count/average/min/max (and median) over a list of sale prices.
    Empty input gives count 0 and None for every statistic.
    """
    summary = {
        "count": len(prices),
        "average": round(sum(prices) / len(prices), 2) if prices else None,
        "min": min(prices) if prices else None,
        "max": max(prices) if prices else None,
    }
    if include_median:
        mid = median(prices)
        summary["median"] = round(mid, 2) if mid is not None else None
    return summary


def bucket_by_window(
    samples: Iterable[SoldItemSample],
    windows_days: Sequence[int] = (30, 60, 90),
    now: Optional[datetime] = None,
) -> Dict[str, Optional[Dict[str, Optional[float]]]]:
    """
    Summaries for sales that ended within each trailing window.

    Windows are inclusive and overlapping (a 10-day-old sale counts in 30d,
    60d and 90d). A window with no sales maps to None.
    """
    now = now or datetime.now(timezone.utc)
    sold = [s for s in samples if s.sold and s.price is not None and s.end_time is not None]

    chart = {}
    for days in windows_days:
        cutoff = now - timedelta(days=days)
        prices = [s.price for s in sold if cutoff <= s.end_time <= now]
        chart[f"{days}d"] = summarize_prices(prices, include_median=False) if prices else None
    return chart
