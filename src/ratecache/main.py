"""Entry point for the rate cache service.

Wires all components together, optionally embeds the FastAPI app, and
starts the tick driver. When the server is enabled (default), ticking and
HTTP share a single asyncio event loop via uvicorn's programmatic API and
FastAPI's lifespan context manager.

Handles SIGINT/SIGTERM for graceful shutdown in headless mode.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. ExchangeClient (CcxtExchangeClient)
4. ExchangeRateSource (fetch collaborator)
5. RateCacheService (cache, pending jobs, rate limiter, dispatcher, queries)
6. TickDriver (periodic tick source)
"""

import asyncio
import signal
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from ratecache.config import AppSettings
from ratecache.engine.service import RateCacheService
from ratecache.exchange.ccxt_client import CcxtExchangeClient
from ratecache.logging import bind_service_context, get_logger, setup_logging
from ratecache.market_data.rate_fetcher import ExchangeRateSource
from ratecache.market_data.tick_driver import TickDriver


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all service components from settings.

    Does NOT connect to the exchange -- that happens in the lifespan
    (server mode) or run() (headless mode).
    """
    exchange_client = CcxtExchangeClient(settings.exchange)
    source = ExchangeRateSource(exchange_client, settings.exchange, settings.cache)
    service = RateCacheService(settings.cache, source)
    tick_driver = TickDriver(service, settings.tick.interval_seconds)

    return {
        "exchange_client": exchange_client,
        "source": source,
        "service": service,
        "tick_driver": tick_driver,
    }


async def _start(settings: AppSettings, components: dict[str, Any]) -> None:
    await components["exchange_client"].connect()
    if settings.tick.enabled:
        await components["tick_driver"].start()


async def _shutdown(components: dict[str, Any]) -> None:
    """Stop ticking, let in-flight fetches finish, then close the exchange."""
    await components["tick_driver"].stop()
    await components["service"].drain()
    await components["exchange_client"].close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application."""
    logger = get_logger("ratecache.main")
    settings = app.state.settings
    components = app.state.components

    app.state.service = components["service"]

    await _start(settings, components)
    logger.info(
        "lifespan_started",
        exchange=settings.exchange.exchange_id,
        symbol=settings.exchange.symbol,
    )

    yield

    await _shutdown(components)
    logger.info("rate_cache_stopped")


async def run() -> None:
    """Run the rate cache service.

    With SERVER_ENABLED=true (default), serves the HTTP API via uvicorn and
    lets the lifespan manage startup/shutdown. Otherwise runs headless
    until SIGINT/SIGTERM.
    """
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_format)
    bind_service_context(settings.exchange.exchange_id, settings.exchange.symbol)
    logger = get_logger("ratecache.main")

    # 3-6. Build all components
    components = _build_components(settings)

    if settings.server.enabled:
        from ratecache.api.app import create_app

        app = create_app(lifespan=lifespan)
        app.state.settings = settings
        app.state.components = components

        logger.info(
            "starting_with_server",
            host=settings.server.host,
            port=settings.server.port,
        )

        config = uvicorn.Config(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_level="warning",  # Suppress uvicorn access logs
        )
        server = uvicorn.Server(config)
        await server.serve()
        return

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)

    logger.info(
        "starting_headless",
        exchange=settings.exchange.exchange_id,
        symbol=settings.exchange.symbol,
    )
    try:
        await _start(settings, components)
        await stop_event.wait()
    finally:
        await _shutdown(components)
        logger.info("rate_cache_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
