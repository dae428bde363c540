"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from coinfacade.markets import MarketInfo
from coinfacade.signing import Credentials

EOS_DEV_PRIVATE_KEY = "5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3"


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def credentials(api_key, api_secret):
    """Credentials with a Bitstamp-style customer id."""
    return Credentials(api_key, api_secret, customer_id=123456)


@pytest.fixture
def eos_private_key():
    """eosio development key, a valid WIF."""
    return EOS_DEV_PRIVATE_KEY


@pytest.fixture
def btc_usdt_market():
    """Binance BTC_USDT market."""
    return MarketInfo(
        exchange="Binance",
        raw_pair="BTCUSDT",
        normalized_pair="BTC_USDT",
        price_precision=2,
        base_precision=4,
        quote_precision=6,
        min_base_quantity=Decimal("0.0001"),
        min_quote_quantity=Decimal("10"),
    )


@pytest.fixture
def eidos_eos_market():
    """WhaleEx EIDOS_EOS market traded on chain."""
    return MarketInfo(
        exchange="WhaleEx",
        raw_pair="EIDOSEOS",
        normalized_pair="EIDOS_EOS",
        price_precision=6,
        base_precision=4,
        quote_precision=4,
        min_quote_quantity=Decimal("0.01"),
        base_contract="eidosonecoin",
        quote_contract="eosio.token",
    )


@pytest.fixture
def sample_balance_response():
    """Sample Binance account response."""
    return {
        "balances": [
            {"asset": "BTC", "free": "0.5", "locked": "0.1"},
            {"asset": "ETH", "free": "10.0", "locked": "2.0"},
            {"asset": "USDT", "free": "1000.0", "locked": "0.0"},
        ]
    }
