"""Tests for market metadata loading and caching."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from coinfacade.errors import ConfigurationError
from coinfacade.markets import FileMarketProvider, MarketCache, MarketInfo

MARKETS_YAML = """
Binance:
  BTC_USDT:
    raw_pair: BTCUSDT
    price_precision: 2
    base_precision: 6
    quote_precision: 8
    min_quote_quantity: "10"
WhaleEx:
  EIDOS_EOS:
    raw_pair: EIDOSEOS
    price_precision: 6
    base_precision: 4
    quote_precision: 4
    min_quote_quantity: "0.01"
    base_contract: eidosonecoin
    quote_contract: eosio.token
"""


class TestMarketInfo:
    def test_currencies(self, btc_usdt_market):
        assert btc_usdt_market.base_currency == "BTC"
        assert btc_usdt_market.quote_currency == "USDT"

    def test_rejects_malformed_pair(self):
        with pytest.raises(ValidationError):
            MarketInfo(
                exchange="Binance",
                raw_pair="BTCUSDT",
                normalized_pair="BTCUSDT",
                price_precision=2,
                base_precision=6,
                quote_precision=8,
            )

    def test_rejects_negative_precision(self):
        with pytest.raises(ValidationError):
            MarketInfo(
                exchange="Binance",
                raw_pair="BTCUSDT",
                normalized_pair="BTC_USDT",
                price_precision=-1,
                base_precision=6,
                quote_precision=8,
            )


class TestFileMarketProvider:
    @pytest.mark.asyncio
    async def test_loads_markets(self, tmp_path):
        path = tmp_path / "markets.yml"
        path.write_text(MARKETS_YAML, encoding="utf-8")
        provider = FileMarketProvider(path)

        markets = await provider.fetch_markets("WhaleEx")

        market = markets["EIDOS_EOS"]
        assert market.exchange == "WhaleEx"
        assert market.base_contract == "eidosonecoin"
        assert market.min_quote_quantity == Decimal("0.01")
        assert market.min_base_quantity is None

    @pytest.mark.asyncio
    async def test_unknown_exchange_is_empty(self, tmp_path):
        path = tmp_path / "markets.yml"
        path.write_text(MARKETS_YAML, encoding="utf-8")
        assert await FileMarketProvider(path).fetch_markets("Huobi") == {}

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            await FileMarketProvider(tmp_path / "missing.yml").fetch_markets("Binance")

    @pytest.mark.asyncio
    async def test_invalid_market(self, tmp_path):
        path = tmp_path / "markets.yml"
        path.write_text("Binance:\n  BTC_USDT:\n    raw_pair: BTCUSDT\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid market"):
            await FileMarketProvider(path).fetch_markets("Binance")


class TestMarketCache:
    @pytest.mark.asyncio
    async def test_fetches_once_per_exchange(self, btc_usdt_market):
        provider = AsyncMock()
        provider.fetch_markets = AsyncMock(return_value={"BTC_USDT": btc_usdt_market})
        cache = MarketCache(provider)

        assert await cache.get_market("Binance", "BTC_USDT") is btc_usdt_market
        assert await cache.get_market("Binance", "btc_usdt") is btc_usdt_market

        provider.fetch_markets.assert_awaited_once_with("Binance", "Spot")

    @pytest.mark.asyncio
    async def test_unknown_pair(self, btc_usdt_market):
        provider = AsyncMock()
        provider.fetch_markets = AsyncMock(return_value={"BTC_USDT": btc_usdt_market})
        cache = MarketCache(provider)

        with pytest.raises(ConfigurationError, match="no market"):
            await cache.get_market("Binance", "ETH_USDT")
