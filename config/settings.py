"""
Centralized Configuration Settings for the Thrift Fashion Proxy

All configuration values are consolidated here for easy management:
environment credentials, server settings, and the static tables used by
the marketplace resolver, the fashion classifier and the trending feed.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ============================================================
# ENVIRONMENT LOADING
# ============================================================
BASE_DIR = Path(__file__).parent.parent

_env_path = BASE_DIR / ".env"
if _env_path.exists():
    load_dotenv(_env_path)
    logger.info(f"[CONFIG] Loaded .env from {_env_path}")
else:
    load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ============================================================
# SERVER SETTINGS
# ============================================================
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG_ERRORS = _env_bool("DEBUG_ERRORS")

# ============================================================
# EBAY ENDPOINTS
# ============================================================
EBAY_API_BASE = os.getenv("EBAY_API_BASE", "https://api.ebay.com").rstrip("/")
EBAY_FINDING_URL = os.getenv(
    "EBAY_FINDING_URL",
    "https://svcs.ebay.com/services/search/FindingService/v1",
)
EBAY_OAUTH_SCOPE = os.getenv("EBAY_OAUTH_SCOPE", "https://api.ebay.com/oauth/api_scope")
EBAY_HTTP_TIMEOUT = float(os.getenv("EBAY_HTTP_TIMEOUT", "20"))

# ============================================================
# CACHE
# ============================================================
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "300"))  # 5 minutes

# ============================================================
# MARKETPLACES
# ============================================================
DEFAULT_MARKETPLACE = "EBAY_US"

MARKETPLACE_MAP: Dict[str, str] = {
    "US": "EBAY_US",
    "UK": "EBAY_GB",
    "GB": "EBAY_GB",
    "AU": "EBAY_AU",
    "CA": "EBAY_CA",
    "DE": "EBAY_DE",
    "FR": "EBAY_FR",
    "IT": "EBAY_IT",
    "ES": "EBAY_ES",
    "AT": "EBAY_AT",
    "NL": "EBAY_NL",
    "CH": "EBAY_CH",
    "IE": "EBAY_IE",
    "PL": "EBAY_PL",
    "SG": "EBAY_SG",
    "HK": "EBAY_HK",
    "MY": "EBAY_MY",
    "PH": "EBAY_PH",
}

# ============================================================
# FASHION CLASSIFIER
# ============================================================
FASHION_USE_CATEGORIES = _env_bool("FASHION_USE_CATEGORIES", "true")

# Checked first: any hit rejects the listing outright
FASHION_BLOCKLIST: List[str] = [
    # Toys / collectibles
    'toy', 'lego', 'funko', 'action figure', 'plush', 'doll house', 'dollhouse',
    'hot wheels', 'diecast', 'die-cast', 'puzzle', 'board game',
    # Trading cards
    'pokemon', 'trading card', 'tcg', 'psa ', 'bgs ', 'yugioh', 'yu-gi-oh',
    'mtg', 'magic the gathering', 'booster', 'topps', 'panini',
    # Electronics & accessories
    'phone case', 'iphone', 'samsung', 'airpods', 'charger', 'usb cable',
    'screen protector', 'laptop', 'tablet', 'console', 'controller',
    'headphones', 'earbuds', 'smartwatch band',
    # Home / furniture
    'furniture', 'sofa', 'armchair', 'coffee table', 'lamp', 'curtain',
    'bedding', 'mattress', 'cushion cover', 'wall art', 'poster',
    # Digital / non-physical
    'digital download', 'pdf', 'ebook', 'e-book', 'sewing pattern',
    'template', 'svg', 'printable',
    # Bundle / lot language
    'wholesale', 'bulk lot', 'job lot', 'mystery box', 'mystery bundle',
    'reseller bundle', 'lot of',
    # Miscellaneous non-apparel
    'sticker', 'patch pack', 'keychain', 'mannequin', 'hanger',
    'dog collar', 'dog harness', 'baby doll',
]

FASHION_ALLOWLIST: List[str] = [
    # Style terms
    'vintage', 'retro', 'y2k', '90s', '80s', '70s', 'streetwear', 'grunge',
    'thrift', 'preloved', 'pre-owned', 'boho', 'gorpcore', 'workwear',
    'archive', 'designer',
    # Garments
    'jacket', 'coat', 'hoodie', 'sweatshirt', 'sweater', 'cardigan',
    'jumper', 'shirt', 'tee', 't-shirt', 'blouse', 'top', 'dress', 'skirt',
    'jeans', 'denim', 'pants', 'trousers', 'shorts', 'cargo', 'vest',
    'blazer', 'windbreaker', 'fleece', 'parka', 'puffer', 'jersey',
    'corset', 'overalls', 'tracksuit', 'joggers',
    # Footwear & accessories
    'sneakers', 'shoes', 'boots', 'loafers', 'sandals', 'heels', 'trainers',
    'dunk', 'jordan', 'handbag', 'bag', 'purse', 'tote', 'backpack',
    'belt', 'scarf', 'beanie', 'cap', 'hat', 'sunglasses',
    # Brands
    'nike', 'adidas', 'levi', "levi's", 'carhartt', 'patagonia',
    'north face', 'ralph lauren', 'polo', 'tommy hilfiger', 'stussy',
    'supreme', 'champion', 'dickies', 'wrangler', 'new balance', 'converse',
    'vans', 'dr martens', 'burberry', 'gucci', 'prada', 'coach', 'zara',
    'harley davidson', 'arc\'teryx', 'columbia', 'fila', 'reebok', 'puma',
]

# Browse API category ids treated as fashion when FASHION_USE_CATEGORIES is on
FASHION_CATEGORY_IDS: List[str] = [
    "11450",   # Clothing, Shoes & Accessories
    "1059",    # Men's Clothing
    "15724",   # Women's Clothing
    "93427",   # Men's Shoes
    "3034",    # Women's Shoes
    "169291",  # Women's Bags & Handbags
    "4250",    # Women's Accessories
    "4251",    # Men's Accessories
    "175759",  # Vintage Clothing & Accessories
    "155184",  # Unisex Clothing, Shoes & Accs
]

# Category ids sent upstream to narrow searches
SEARCH_CATEGORY_IDS = "11450,15724,3034"

# ============================================================
# TRENDING FEED
# ============================================================
TRENDING_SEED_QUERIES: List[str] = [
    "nike dunk",
    "vintage jacket",
    "y2k top",
    "carhartt jacket",
    "levis 501",
    "vintage band tee",
    "north face puffer",
    "adidas track jacket",
    "ralph lauren polo",
    "streetwear hoodie",
    "vintage denim jacket",
    "dr martens boots",
    "patagonia fleece",
    "coach bag vintage",
]
TRENDING_SEED_LIMIT = 50
TRENDING_DEFAULT_LIMIT = 40

# ============================================================
# SOLD ITEMS
# ============================================================
PRICE_HISTORY_PAGE_SIZE = 100
CHART_PAGE_SIZE = 120
CHART_WINDOWS_DAYS = (30, 60, 90)


# ============================================================
# SETTINGS OBJECT
# ============================================================
@dataclass
class ThriftSettings:
    """Credentials and tunables consumed by the app factory."""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    refresh_token: Optional[str] = None
    static_token: Optional[str] = None
    app_id: Optional[str] = None          # Finding API SECURITY-APPNAME
    oauth_scope: str = EBAY_OAUTH_SCOPE
    api_base: str = EBAY_API_BASE
    finding_url: str = EBAY_FINDING_URL
    http_timeout: float = EBAY_HTTP_TIMEOUT
    cache_ttl: int = CACHE_TTL_SECONDS
    use_categories: bool = FASHION_USE_CATEGORIES
    debug_errors: bool = DEBUG_ERRORS
    blocklist: List[str] = field(default_factory=lambda: list(FASHION_BLOCKLIST))
    allowlist: List[str] = field(default_factory=lambda: list(FASHION_ALLOWLIST))
    category_ids: List[str] = field(default_factory=lambda: list(FASHION_CATEGORY_IDS))

    @property
    def token_url(self) -> str:
        return f"{self.api_base}/identity/v1/oauth2/token"

    @property
    def has_refresh_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)

    @classmethod
    def from_env(cls) -> "ThriftSettings":
        client_id = os.getenv("EBAY_CLIENT_ID") or None
        settings = cls(
            client_id=client_id,
            client_secret=os.getenv("EBAY_CLIENT_SECRET") or None,
            refresh_token=os.getenv("EBAY_REFRESH_TOKEN") or None,
            static_token=os.getenv("EBAY_TOKEN") or None,
            app_id=os.getenv("EBAY_APP_ID") or client_id,
        )

        if settings.has_refresh_credentials:
            logger.info(f"[CONFIG] eBay client loaded ({settings.client_id[:8]}...) - token refresh enabled")
        elif settings.static_token:
            logger.info("[CONFIG] Using static EBAY_TOKEN - token refresh disabled")
        else:
            logger.warning("[CONFIG] WARNING: no eBay credentials set! Check your .env file.")

        if not settings.app_id:
            logger.warning("[CONFIG] WARNING: EBAY_APP_ID not set - sold item endpoints disabled")

        return settings
