"""Tests for CcxtExchangeClient.

All tests use mocked ccxt exchange objects to avoid real API calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ratecache.config import ExchangeSettings
from ratecache.exchange.ccxt_client import CcxtExchangeClient


@pytest.fixture
def settings() -> ExchangeSettings:
    return ExchangeSettings(exchange_id="bybit", symbol="BTC/USDT", request_timeout_ms=5000)


@pytest.fixture
def client(settings: ExchangeSettings) -> CcxtExchangeClient:
    with patch("ratecache.exchange.ccxt_client.ccxt_async") as mock_ccxt:
        mock_exchange = MagicMock()
        mock_exchange.load_markets = AsyncMock(return_value={"BTC/USDT": {}})
        mock_exchange.fetch_ohlcv = AsyncMock(return_value=[[0, 1, 1, 1, 1, 1]])
        mock_exchange.close = AsyncMock()
        mock_exchange.last_http_response = None
        mock_exchange.last_response_headers = {}
        mock_ccxt.bybit.return_value = mock_exchange
        c = CcxtExchangeClient(settings)
    return c


class TestInit:
    def test_config_passed_to_ccxt(self, settings: ExchangeSettings) -> None:
        with patch("ratecache.exchange.ccxt_client.ccxt_async") as mock_ccxt:
            CcxtExchangeClient(settings)
            config = mock_ccxt.bybit.call_args.args[0]
        assert config["enableRateLimit"] is True
        assert config["timeout"] == 5000
        assert config["enableLastHttpResponse"] is True

    def test_unknown_exchange_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown ccxt exchange id"):
            CcxtExchangeClient(ExchangeSettings(exchange_id="not_a_real_exchange"))


class TestCalls:
    @pytest.mark.asyncio
    async def test_connect_loads_markets(self, client: CcxtExchangeClient) -> None:
        await client.connect()
        client.exchange.load_markets.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close(self, client: CcxtExchangeClient) -> None:
        await client.close()
        client.exchange.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_ohlcv_passthrough(self, client: CcxtExchangeClient) -> None:
        candles = await client.fetch_ohlcv("BTC/USDT", "1m", since=0, limit=200)
        assert candles == [[0, 1, 1, 1, 1, 1]]
        client.exchange.fetch_ohlcv.assert_awaited_once_with(
            "BTC/USDT", "1m", since=0, limit=200, params={}
        )


class TestLastResponse:
    def test_no_response_yet(self, client: CcxtExchangeClient) -> None:
        assert client.last_response() == (0, {}, b"")

    def test_captured_response(self, client: CcxtExchangeClient) -> None:
        client.exchange.last_http_response = '{"retCode":0}'
        client.exchange.last_response_headers = {"X-Frame-Options": "DENY"}
        status, headers, body = client.last_response()
        assert status == 200
        assert headers == {"X-Frame-Options": "DENY"}
        assert body == b'{"retCode":0}'
