"""Exchange client layer -- ccxt integration and response sanitization."""

from ratecache.exchange.ccxt_client import CcxtExchangeClient
from ratecache.exchange.client import ExchangeClient
from ratecache.exchange.sanitize import ALLOWED_HEADERS, SanitizedResponse, sanitize_response

__all__ = [
    "ALLOWED_HEADERS",
    "CcxtExchangeClient",
    "ExchangeClient",
    "SanitizedResponse",
    "sanitize_response",
]
