"""ccxt-backed exchange client.

Wraps ccxt.async_support.<exchange_id> with market loading, response
capture for sanitization, and async cleanup.
"""

import ccxt.async_support as ccxt_async

from ratecache.config import ExchangeSettings
from ratecache.exchange.client import ExchangeClient
from ratecache.logging import get_logger

logger = get_logger(__name__)


class CcxtExchangeClient(ExchangeClient):
    """Concrete exchange client for any ccxt-supported exchange id."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings

        exchange_cls = getattr(ccxt_async, settings.exchange_id, None)
        if exchange_cls is None:
            raise ValueError(f"Unknown ccxt exchange id: {settings.exchange_id}")

        self._exchange = exchange_cls(
            {
                "enableRateLimit": True,
                "timeout": settings.request_timeout_ms,
                "enableLastHttpResponse": True,
                "enableLastResponseHeaders": True,
            }
        )

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_exchange", exchange=self._settings.exchange_id)
        markets = await self._exchange.load_markets()
        if self._settings.symbol not in markets:
            logger.warning(
                "symbol_not_listed",
                exchange=self._settings.exchange_id,
                symbol=self._settings.symbol,
            )
        logger.info(
            "exchange_connected",
            exchange=self._settings.exchange_id,
            market_count=len(markets),
        )

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_exchange_connection", exchange=self._settings.exchange_id)
        await self._exchange.close()

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: dict | None = None,
    ) -> list[list]:
        """Fetch OHLCV candles via ccxt."""
        return await self._exchange.fetch_ohlcv(
            symbol, timeframe, since=since, limit=limit, params=params or {}
        )

    def last_response(self) -> tuple[int, dict[str, str], bytes]:
        """Return the last raw response captured by ccxt.

        ccxt raises on non-2xx statuses, so a captured body always belongs
        to a successful response.
        """
        body = self._exchange.last_http_response
        if body is None:
            return 0, {}, b""
        headers = dict(self._exchange.last_response_headers or {})
        raw = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        return 200, headers, raw
