"""Market data layer -- remote batch fetching and the periodic tick source."""

from ratecache.market_data.rate_fetcher import (
    ExchangeRateSource,
    RateSource,
    granularity_to_timeframe,
)
from ratecache.market_data.tick_driver import TickDriver

__all__ = ["ExchangeRateSource", "RateSource", "TickDriver", "granularity_to_timeframe"]
