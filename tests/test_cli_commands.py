"""Tests for CLI command parsing and basic functionality."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock, Mock, patch

from typer.testing import CliRunner

from coinfacade.cli import app

ETH_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

runner = CliRunner()


def make_facade(**methods):
    facade = Mock()
    facade.init = AsyncMock()
    facade.close = AsyncMock()
    for name, value in methods.items():
        setattr(facade, name, AsyncMock(**value))
    return facade


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Unified order execution" in result.output


def test_cli_commands_available():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("balances", "place", "cancel", "query", "deposit-addresses", "detect", "format-number", "dex-order"):
        assert command in result.output


def test_format_number():
    result = runner.invoke(app, ["format-number", "1.005", "2", "--ceil"])
    assert result.exit_code == 0
    assert result.output.strip() == "1.01"

    result = runner.invoke(app, ["format-number", "1.005", "2"])
    assert result.output.strip() == "1.00"


def test_format_number_rejects_garbage():
    result = runner.invoke(app, ["format-number", "abc", "2"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_detect():
    result = runner.invoke(app, ["detect", ETH_ADDRESS, "USDT"])
    assert result.exit_code == 0
    assert result.output.strip() == "ERC20"

    result = runner.invoke(app, ["detect", ETH_ADDRESS, "ETH"])
    assert result.output.strip() == "default"


@patch("coinfacade.cli._build_facade")
def test_balances(mock_build_facade):
    facade = make_facade(query_all_balances={"return_value": {"BTC": Decimal("0.5"), "XRP": Decimal("0")}})
    mock_build_facade.return_value = facade

    result = runner.invoke(app, ["balances", "Binance"])

    assert result.exit_code == 0
    assert "BTC" in result.output
    assert "0.5" in result.output
    assert "XRP" not in result.output
    facade.init.assert_awaited_once()
    facade.close.assert_awaited_once()


@patch("coinfacade.cli._build_facade")
def test_place_sell(mock_build_facade):
    facade = make_facade(place_order={"return_value": "28457"})
    mock_build_facade.return_value = facade

    result = runner.invoke(app, ["place", "Binance", "BTC_USDT", "30000", "0.01", "--sell"])

    assert result.exit_code == 0
    assert "28457" in result.output
    facade.place_order.assert_awaited_once_with("Binance", "BTC_USDT", "30000", "0.01", True, None)


@patch("coinfacade.cli._build_facade")
def test_command_failure_exits_nonzero(mock_build_facade):
    facade = make_facade(place_order={"side_effect": ValueError("Unknown exchange: Kraken")})
    mock_build_facade.return_value = facade

    result = runner.invoke(app, ["place", "Kraken", "BTC_USDT", "1", "1"])

    assert result.exit_code == 1
    assert "Unknown exchange" in result.output
    facade.close.assert_awaited_once()


@patch("coinfacade.cli._build_facade")
def test_cancel_not_cancelled(mock_build_facade):
    mock_build_facade.return_value = make_facade(cancel_order={"return_value": False})

    result = runner.invoke(app, ["cancel", "Huobi", "BTC_USDT", "59378"])

    assert result.exit_code == 1
    assert "not cancelled" in result.output


@patch("coinfacade.cli._build_facade")
def test_query_missing_order(mock_build_facade):
    mock_build_facade.return_value = make_facade(query_order={"return_value": None})

    result = runner.invoke(app, ["query", "Bitstamp", "BTC_USD", "42"])

    assert result.exit_code == 1
    assert "not found" in result.output
