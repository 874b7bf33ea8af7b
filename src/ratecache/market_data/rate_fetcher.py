"""Fetch collaborator: one remote batch of candles per call.

ExchangeRateSource requests exactly ``points_per_batch`` candles at the
cache granularity for one fixed symbol, sanitizes the raw response,
enforces a fixed byte budget, and reports the outcome as a FetchResult.
It never raises for exchange or network problems; the dispatcher branches
on the returned value.
"""

import asyncio
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation

import ccxt.async_support as ccxt_async

from ratecache.config import CacheSettings, ExchangeSettings
from ratecache.exceptions import FetchError, ResponseTooLargeError
from ratecache.exchange.client import ExchangeClient
from ratecache.exchange.sanitize import sanitize_response
from ratecache.logging import get_logger
from ratecache.models import FetchErrorKind, FetchResult, RateSample

logger = get_logger(__name__)


def granularity_to_timeframe(seconds: int) -> str:
    """Convert a granularity in seconds to a ccxt timeframe string (60 -> "1m")."""
    if seconds % 86_400 == 0:
        return f"{seconds // 86_400}d"
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


class RateSource(ABC):
    """Anything that can fill a batch window with rate samples."""

    @abstractmethod
    async def fetch(self, window_start: int, window_end: int) -> FetchResult:
        """Fetch samples covering ``[window_start, window_end)``."""
        ...


class ExchangeRateSource(RateSource):
    """RateSource backed by an exchange's OHLCV endpoint (close price as rate).

    Usage:
        source = ExchangeRateSource(client, settings.exchange, settings.cache)
        result = await source.fetch(0, 12_000)
    """

    def __init__(
        self,
        exchange: ExchangeClient,
        exchange_settings: ExchangeSettings,
        cache_settings: CacheSettings,
    ) -> None:
        self._exchange = exchange
        self._symbol = exchange_settings.symbol
        self._granularity = cache_settings.granularity_seconds
        self._points = cache_settings.points_per_batch
        self._timeframe = granularity_to_timeframe(self._granularity)
        self._max_response_bytes = exchange_settings.max_response_bytes(self._points)

    @property
    def max_response_bytes(self) -> int:
        return self._max_response_bytes

    async def fetch(self, window_start: int, window_end: int) -> FetchResult:
        try:
            candles = await self._exchange.fetch_ohlcv(
                self._symbol,
                timeframe=self._timeframe,
                since=window_start * 1000,
                limit=self._points,
            )
            sanitized = sanitize_response(*self._exchange.last_response())
            if len(sanitized.body) > self._max_response_bytes:
                raise ResponseTooLargeError(len(sanitized.body), self._max_response_bytes)
            samples = self._parse_candles(candles, window_start, window_end)
        except FetchError as e:
            return FetchResult.failure(window_start, window_end, e.kind, str(e))
        except (ccxt_async.RequestTimeout, asyncio.TimeoutError) as e:
            return FetchResult.failure(window_start, window_end, FetchErrorKind.TIMEOUT, str(e))
        except ccxt_async.NetworkError as e:
            return FetchResult.failure(window_start, window_end, FetchErrorKind.NETWORK, str(e))
        except ccxt_async.BaseError as e:
            return FetchResult.failure(window_start, window_end, FetchErrorKind.EXCHANGE, str(e))

        logger.debug(
            "batch_fetched",
            symbol=self._symbol,
            window_start=window_start,
            candles=len(candles),
            samples=len(samples),
            body_bytes=len(sanitized.body),
        )
        return FetchResult.success(window_start, window_end, samples, headers=sanitized.headers)

    def _parse_candles(
        self, candles: list[list], window_start: int, window_end: int
    ) -> list[RateSample]:
        """Convert ccxt rows to aligned samples inside the window."""
        samples: list[RateSample] = []
        for candle in candles:
            try:
                timestamp = int(candle[0]) // 1000
                close = candle[4]
                if close is None:
                    continue
                rate = Decimal(str(close))
            except (IndexError, TypeError, ValueError, InvalidOperation) as e:
                raise FetchError(FetchErrorKind.MALFORMED, f"malformed candle {candle!r}") from e

            if not window_start <= timestamp < window_end:
                continue
            if timestamp % self._granularity != 0:
                continue
            samples.append(RateSample(timestamp=timestamp, rate=rate))
        return samples
