"""Tests for the unified trade facade."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr

from coinfacade.dex import ActionExtended
from coinfacade.errors import ConfigurationError
from coinfacade.facade import TradeFacade
from coinfacade.platform import PlatformTag
from coinfacade.settings import EosSettings, Settings

ETH_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class FakeProvider:
    def __init__(self, *markets):
        self.markets = markets
        self.calls = []

    async def fetch_markets(self, exchange, market_type="Spot"):
        self.calls.append(exchange)
        return {m.normalized_pair: m for m in self.markets if m.exchange == exchange}


class FakeClient:
    """Records calls the facade dispatches."""

    def __init__(self, name):
        self.name = name
        self.place_order = AsyncMock(return_value="1001")
        self.cancel_order = AsyncMock(return_value=True)
        self.query_order = AsyncMock(return_value={"status": "open"})
        self.query_balance = AsyncMock(return_value=Decimal("1.5"))
        self.query_all_balances = AsyncMock(return_value={"BTC": Decimal("1.5")})
        self.get_deposit_addresses = AsyncMock(return_value={})
        self.withdraw = AsyncMock(return_value="w-1")
        self.close = AsyncMock()


class FakeDexClient(FakeClient):
    def __init__(self, name):
        super().__init__(name)
        self.initialize = AsyncMock()


@pytest.fixture
def binance():
    return FakeClient("Binance")


@pytest.fixture
def facade(btc_usdt_market, eidos_eos_market, binance):
    return TradeFacade(Settings(), FakeProvider(btc_usdt_market, eidos_eos_market), {"Binance": binance})


@pytest.fixture
def eos_settings(eos_private_key):
    return Settings(eos=EosSettings(account="coinracetest", private_key=SecretStr(eos_private_key)))


class TestCheckExchangeAndPair:
    def test_valid(self, facade):
        assert facade.check_exchange_and_pair("Binance", "BTC_USDT") is True

    @pytest.mark.parametrize("exchange", ["", "Kraken", "binance"])
    def test_unknown_exchange(self, facade, exchange):
        with pytest.raises(ValueError):
            facade.check_exchange_and_pair(exchange, "BTC_USDT")

    @pytest.mark.parametrize("pair", ["", "BTCUSDT", "BTC_USDT_X"])
    def test_malformed_pair(self, facade, pair):
        with pytest.raises(ValueError):
            facade.check_exchange_and_pair("Binance", pair)

    def test_dex_pair_needs_eos_account(self, facade):
        with pytest.raises(ConfigurationError):
            facade.check_exchange_and_pair("WhaleEx", "EIDOS_EOS")

    def test_dex_pair_with_eos_account(self, eos_settings, btc_usdt_market):
        facade = TradeFacade(eos_settings, FakeProvider(btc_usdt_market))
        assert facade.check_exchange_and_pair("WhaleEx", "EIDOS_EOS") is True

    def test_non_eos_pair_on_dex_exchange(self, facade):
        assert facade.check_exchange_and_pair("WhaleEx", "EIDOS_USDT") is True


class TestDispatch:
    """Tests that operations reach the right adapter with the right market."""

    @pytest.mark.asyncio
    async def test_place_order(self, facade, binance, btc_usdt_market):
        order_id = await facade.place_order("Binance", "BTC_USDT", "30000", "0.01", True, "cid")

        assert order_id == "1001"
        binance.place_order.assert_awaited_once_with(btc_usdt_market, "30000", "0.01", True, "cid")

    @pytest.mark.asyncio
    async def test_markets_are_cached(self, facade):
        await facade.place_order("Binance", "BTC_USDT", "30000", "0.01", True)
        await facade.query_order("Binance", "BTC_USDT", "1001")
        assert facade.markets.provider.calls == ["Binance"]

    @pytest.mark.asyncio
    async def test_cancel_and_query(self, facade, binance, btc_usdt_market):
        assert await facade.cancel_order("Binance", "BTC_USDT", "1001") is True
        assert await facade.query_order("Binance", "BTC_USDT", "1001") == {"status": "open"}
        binance.cancel_order.assert_awaited_once_with(btc_usdt_market, "1001")

    @pytest.mark.asyncio
    async def test_order_id_required(self, facade):
        with pytest.raises(ValueError):
            await facade.cancel_order("Binance", "BTC_USDT", "")
        with pytest.raises(ValueError):
            await facade.query_order("Binance", "BTC_USDT", "")

    @pytest.mark.asyncio
    async def test_balances(self, facade, binance):
        assert await facade.query_balance("Binance", "BTC") == Decimal("1.5")
        assert await facade.query_all_balances("Binance") == {"BTC": Decimal("1.5")}
        binance.query_balance.assert_awaited_once_with("BTC")

    @pytest.mark.asyncio
    async def test_unconfigured_exchange(self, facade):
        with pytest.raises(ConfigurationError):
            await facade.query_all_balances("Huobi")

    @pytest.mark.asyncio
    async def test_unknown_pair(self, facade):
        with pytest.raises(ConfigurationError):
            await facade.place_order("Binance", "ETH_USDT", "1", "1", False)


class TestWithdraw:
    @pytest.mark.asyncio
    async def test_platform_detected_from_address(self, facade, binance):
        await facade.withdraw("Binance", "USDT", ETH_ADDRESS, "25")
        binance.withdraw.assert_awaited_once_with("USDT", ETH_ADDRESS, "25", None, PlatformTag.ERC20)

    @pytest.mark.asyncio
    async def test_native_asset_uses_default_platform(self, facade, binance):
        await facade.withdraw("Binance", "ETH", ETH_ADDRESS, "1")
        binance.withdraw.assert_awaited_once_with("ETH", ETH_ADDRESS, "1", None, None)

    @pytest.mark.asyncio
    async def test_explicit_platform_wins(self, facade, binance):
        await facade.withdraw("Binance", "USDT", ETH_ADDRESS, "1", platform=PlatformTag.TRC20)
        assert binance.withdraw.await_args.args[-1] is PlatformTag.TRC20

    @pytest.mark.asyncio
    async def test_address_required(self, facade):
        with pytest.raises(ValueError):
            await facade.withdraw("Binance", "USDT", "", "1")


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_builds_dex_action(self, eos_settings, eidos_eos_market):
        facade = TradeFacade(eos_settings, FakeProvider(eidos_eos_market))

        extended = await facade.create_order("WhaleEx", "EIDOS_EOS", "0.0123", "100.5", False)

        assert isinstance(extended, ActionExtended)
        assert extended.exchange == "WhaleEx"
        assert extended.action.data["from"] == "coinracetest"
        assert extended.action.data["quantity"] == "1.2362 EOS"
        assert extended.order_id in extended.action.data["memo"]

    @pytest.mark.asyncio
    async def test_rejects_centralized_exchange(self, facade):
        with pytest.raises(ValueError):
            await facade.create_order("Binance", "BTC_USDT", "1", "1", False)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_init_and_close(self, btc_usdt_market, binance):
        whaleex = FakeDexClient("WhaleEx")
        facade = TradeFacade(Settings(), FakeProvider(btc_usdt_market), {"Binance": binance, "WhaleEx": whaleex})

        await facade.init()
        await facade.close()

        whaleex.initialize.assert_awaited_once()
        binance.close.assert_awaited_once()
        whaleex.close.assert_awaited_once()
