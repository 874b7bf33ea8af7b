"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Cache granularity, batch size, dispatch throttling and response budget.

    All fields configurable via CACHE_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    granularity_seconds: int = 60  # G: cache key alignment
    points_per_batch: int = 200  # samples fetched per remote call
    rate_limit_factor: int = 5  # dispatch on 1 of every N ticks
    max_points: int = 10_000  # response point-count ceiling
    sampling_ladder: list[int] = [1, 5, 15, 60, 720, 1440]  # multiples of G

    @field_validator("granularity_seconds", "points_per_batch", "rate_limit_factor", "max_points")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("sampling_ladder")
    @classmethod
    def _ascending_ladder(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("sampling ladder must not be empty")
        if value[0] < 1:
            raise ValueError("sampling ladder multipliers must be positive")
        if any(b <= a for a, b in zip(value, value[1:])):
            raise ValueError("sampling ladder must be strictly ascending")
        return value

    @property
    def batch_seconds(self) -> int:
        """Width of one fetch batch window in seconds."""
        return self.granularity_seconds * self.points_per_batch


class ExchangeSettings(BaseSettings):
    """Remote exchange connection settings for the single tracked pair."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGE_")

    exchange_id: str = "bybit"
    symbol: str = "BTC/USDT"
    request_timeout_ms: int = 10_000
    bytes_per_point: int = 200  # upper bound for one serialized candle
    header_overhead_bytes: int = 2048

    def max_response_bytes(self, points: int) -> int:
        """Byte budget for a single fetch of ``points`` candles."""
        return points * self.bytes_per_point + self.header_overhead_bytes


class TickSettings(BaseSettings):
    """Periodic tick source configuration."""

    model_config = SettingsConfigDict(env_prefix="TICK_")

    enabled: bool = True
    interval_seconds: float = 1.0


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    cache: CacheSettings = CacheSettings()
    exchange: ExchangeSettings = ExchangeSettings()
    tick: TickSettings = TickSettings()
    server: ServerSettings = ServerSettings()
