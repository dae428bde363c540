"""Market metadata models, providers and the per-exchange cache."""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class MarketInfo(BaseModel):
    """A tradable pair on one exchange."""

    exchange: str
    raw_pair: str
    normalized_pair: str
    price_precision: int = Field(ge=0)
    base_precision: int = Field(ge=0)
    quote_precision: int = Field(ge=0)
    min_base_quantity: Decimal | None = None
    min_quote_quantity: Decimal | None = None
    base_contract: str | None = None
    quote_contract: str | None = None

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("normalized_pair")
    @classmethod
    def _check_pair(cls, value: str) -> str:
        parts = value.split("_")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"normalized_pair must look like BASE_QUOTE, got {value!r}")
        return value.upper()

    @property
    def base_currency(self) -> str:
        return self.normalized_pair.split("_")[0]

    @property
    def quote_currency(self) -> str:
        return self.normalized_pair.split("_")[1]


class MarketProvider(Protocol):
    """Source of market metadata for an exchange."""

    async def fetch_markets(self, exchange: str, market_type: str = "Spot") -> dict[str, MarketInfo]:
        ...


class FileMarketProvider:
    """Reads markets from a YAML document keyed by exchange, then by pair."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            if not self.path.exists():
                raise ConfigurationError(f"Markets file not found: {self.path}")
            loaded = yaml.safe_load(self.path.read_text(encoding="utf-8"))
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Markets root must be a mapping, got: {type(loaded)!r}")
            self._data = loaded
        return self._data

    async def fetch_markets(self, exchange: str, market_type: str = "Spot") -> dict[str, MarketInfo]:
        if market_type != "Spot":
            raise ConfigurationError(f"Unsupported market type: {market_type}")

        raw_markets = self._load().get(exchange) or {}
        markets: dict[str, MarketInfo] = {}
        for pair, raw in raw_markets.items():
            record = {"exchange": exchange, "normalized_pair": pair, **raw}
            try:
                market = MarketInfo.model_validate(record)
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid market {exchange} {pair}: {exc}") from exc
            markets[market.normalized_pair] = market
        logger.debug("Loaded %d markets for %s from %s", len(markets), exchange, self.path)
        return markets


class MarketCache:
    """Read-through cache of market metadata, one entry per exchange."""

    def __init__(self, provider: MarketProvider):
        self.provider = provider
        self._markets: dict[str, dict[str, MarketInfo]] = {}

    async def get_markets(self, exchange: str) -> dict[str, MarketInfo]:
        if exchange not in self._markets:
            # concurrent misses may both fetch; the write is keyed and idempotent
            self._markets[exchange] = await self.provider.fetch_markets(exchange, "Spot")
            logger.info("Cached %d markets for %s", len(self._markets[exchange]), exchange)
        return self._markets[exchange]

    async def get_market(self, exchange: str, pair: str) -> MarketInfo:
        markets = await self.get_markets(exchange)
        market = markets.get(pair.upper())
        if market is None:
            raise ConfigurationError(f"{exchange} has no market {pair}")
        return market
