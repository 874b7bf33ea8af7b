"""Abstract exchange client interface.

Defines the contract the fetch collaborator depends on, keeping
ccxt-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod


class ExchangeClient(ABC):
    """Abstract base class for exchange API clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: dict | None = None,
    ) -> list[list]:
        """Fetch OHLCV candle data.

        Returns list of [timestamp_ms, open, high, low, close, volume].
        Pagination is NOT handled here -- callers request one batch at a time.
        """
        ...

    @abstractmethod
    def last_response(self) -> tuple[int, dict[str, str], bytes]:
        """Return (status, headers, body) of the most recent HTTP response.

        Used for response sanitization and byte-budget enforcement.
        """
        ...
