"""
Configuration package for the Thrift Fashion Proxy.

Re-exports everything from config/settings.py.
"""

from .settings import (
    # Paths
    BASE_DIR,

    # Server
    HOST,
    PORT,
    LOG_LEVEL,
    DEBUG_ERRORS,

    # eBay endpoints
    EBAY_API_BASE,
    EBAY_FINDING_URL,
    EBAY_OAUTH_SCOPE,
    EBAY_HTTP_TIMEOUT,

    # Cache
    CACHE_TTL_SECONDS,

    # Marketplaces
    DEFAULT_MARKETPLACE,
    MARKETPLACE_MAP,

    # Fashion classifier
    FASHION_USE_CATEGORIES,
    FASHION_BLOCKLIST,
    FASHION_ALLOWLIST,
    FASHION_CATEGORY_IDS,
    SEARCH_CATEGORY_IDS,

    # Trending
    TRENDING_SEED_QUERIES,
    TRENDING_SEED_LIMIT,
    TRENDING_DEFAULT_LIMIT,

    # Sold items
    PRICE_HISTORY_PAGE_SIZE,
    CHART_PAGE_SIZE,
    CHART_WINDOWS_DAYS,

    # Settings object
    ThriftSettings,
)
