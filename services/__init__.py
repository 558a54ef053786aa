"""
Services Package

eBay access, caching, classification and scoring used by the routes.
"""

from .app_state import AppState, get_app_state_from_request
from .ebay_auth import EbayTokenProvider
from .ebay_search import EbaySearchGateway
from .error_handler import setup_error_handlers
from .exceptions import (
    ProxyException,
    ValidationError,
    MissingParameterError,
    ExternalServiceError,
    UpstreamAuthError,
    UpstreamSearchError,
    UpstreamUnavailableError,
    ConfigurationError,
)
from .fashion_filter import FashionClassifier
from .marketplace import resolve_marketplace

__all__ = [
    # App state
    'AppState',
    'get_app_state_from_request',
    # eBay access
    'EbayTokenProvider',
    'EbaySearchGateway',
    'resolve_marketplace',
    # Classification
    'FashionClassifier',
    # Error handling
    'setup_error_handlers',
    'ProxyException',
    'ValidationError',
    'MissingParameterError',
    'ExternalServiceError',
    'UpstreamAuthError',
    'UpstreamSearchError',
    'UpstreamUnavailableError',
    'ConfigurationError',
]
