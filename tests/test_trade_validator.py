"""Tests for forex_helper.trade_validator — business-rule checks."""

from datetime import datetime, timedelta

import pytest

from forex_helper.errors import TradeRejectedError
from forex_helper.models.currency import CurrencyPair
from forex_helper.models.sizing import LotSize
from forex_helper.models.trade import OpenState, Price, Trade, TradeStatus
from forex_helper.trade_validator import TradeValidator, ValidationResult
from tests.conftest import BASE_TIME, make_trade


def _creation(direction="BUY", entry=1.1000, sl=None, tp=None, lots=0.1):
    return TradeValidator().validate_trade_creation(
        entry_price=Price(value=entry),
        stop_loss=Price(value=sl) if sl is not None else None,
        take_profit=Price(value=tp) if tp is not None else None,
        lot_size=LotSize(value=lots),
        direction=direction,
    )


class TestCreation:
    def test_valid_buy(self):
        result = _creation("BUY", sl=1.0950, tp=1.1100)
        assert result.is_valid
        assert result.errors == []

    def test_valid_sell(self):
        assert _creation("SELL", sl=1.1050, tp=1.0900).is_valid

    def test_levels_optional(self):
        assert _creation("BUY").is_valid

    def test_zero_lot(self):
        assert "Lot size must be greater than 0" in _creation(lots=0).errors

    def test_buy_stop_above_entry(self):
        result = _creation("BUY", sl=1.1050)
        assert result.errors == ["Stop loss for BUY trade must be below entry price"]

    def test_sell_stop_below_entry(self):
        result = _creation("SELL", sl=1.0950)
        assert result.errors == ["Stop loss for SELL trade must be above entry price"]

    def test_buy_target_below_entry(self):
        result = _creation("BUY", tp=1.0900)
        assert result.errors == ["Take profit for BUY trade must be above entry price"]

    def test_sell_target_above_entry(self):
        result = _creation("SELL", tp=1.1100)
        assert result.errors == ["Take profit for SELL trade must be below entry price"]

    def test_collects_every_violation(self):
        # BUY with both levels on the wrong side and crossed
        result = _creation("BUY", sl=1.1100, tp=1.0900, lots=0)
        assert result.errors == [
            "Lot size must be greater than 0",
            "Stop loss for BUY trade must be below entry price",
            "Take profit for BUY trade must be above entry price",
            "Take profit must be above stop loss for BUY trade",
        ]


class TestClosing:
    def test_open_trade(self):
        trade = make_trade()
        assert TradeValidator().validate_trade_closing(trade, Price(value=1.1050)).is_valid

    def test_already_exited(self):
        trade = make_trade(exit_price=1.1050)
        result = TradeValidator().validate_trade_closing(trade, Price(value=1.1060))
        assert result.errors == ["Cannot close a trade that is not open"]

    def test_zero_exit_price(self):
        result = TradeValidator().validate_trade_closing(make_trade(), Price(value=0))
        assert result.errors == ["Exit price must be greater than 0"]

    def test_exit_before_entry(self):
        trade = make_trade()
        early = trade.entry_time - timedelta(minutes=1)
        result = TradeValidator().validate_trade_closing(trade, Price(value=1.1050), early)
        assert result.errors == ["Exit time cannot be before entry time"]

    def test_naive_exit_time_is_utc(self):
        trade = make_trade()
        later = datetime(2030, 1, 1)
        assert TradeValidator().validate_trade_closing(trade, Price(value=1.1050), later).is_valid

    def test_naive_exit_before_entry(self):
        trade = make_trade()
        early = datetime(2024, 1, 15, 9, 59)
        result = TradeValidator().validate_trade_closing(trade, Price(value=1.1050), early)
        assert result.errors == ["Exit time cannot be before entry time"]

    def test_naive_exit_against_default_entry_time(self):
        trade = Trade(user_id="user-1", pair="EURUSD", direction="BUY", entry_price=1.1, lot_size=0.1)
        result = TradeValidator().validate_trade_closing(
            trade, Price(value=1.1050), datetime(2000, 1, 1)
        )
        assert not result.is_valid


class TestRiskAmount:
    def test_within_limit(self):
        assert TradeValidator().validate_risk_amount(200, 10_000).is_valid

    def test_at_limit(self):
        assert TradeValidator(max_risk_pct=5).validate_risk_amount(500, 10_000).is_valid

    def test_zero_risk(self):
        result = TradeValidator().validate_risk_amount(0, 10_000)
        assert result.errors == ["Risk amount must be greater than 0"]

    def test_over_recommended(self):
        result = TradeValidator(max_risk_pct=5).validate_risk_amount(600, 10_000)
        assert result.errors == ["Risk amount (6.00%) exceeds recommended maximum of 5%"]

    def test_exceeds_balance(self):
        result = TradeValidator(max_risk_pct=5).validate_risk_amount(1_500, 1_000)
        assert "Risk amount cannot exceed account balance" in result.errors
        assert len(result.errors) == 2

    def test_non_positive_balance(self):
        result = TradeValidator().validate_risk_amount(100, 0)
        assert result.errors == ["Account balance must be greater than 0"]

    def test_custom_limit(self):
        assert not TradeValidator(max_risk_pct=1).validate_risk_amount(200, 10_000).is_valid


class TestValidationResult:
    def test_merge(self):
        merged = ValidationResult(["a"]).merge(ValidationResult(["b"]))
        assert merged.errors == ["a", "b"]
        assert not merged.is_valid

    @pytest.mark.parametrize("errors,valid", [([], True), (["x"], False)])
    def test_is_valid(self, errors, valid):
        assert ValidationResult(errors).is_valid is valid


def _open(validator=None, **overrides):
    fields = {
        "user_id": "user-1",
        "pair": CurrencyPair.parse("EURUSD"),
        "direction": "BUY",
        "entry_price": Price(value=1.1000),
        "lot_size": LotSize(value=0.1),
        "risk_amount": 100.0,
        "account_balance": 10_000.0,
        "stop_loss": Price(value=1.0950),
        "take_profit": Price(value=1.1100),
    }
    fields.update(overrides)
    return (validator or TradeValidator()).open_trade(**fields)


class TestOpenTrade:
    def test_creates_open_trade(self):
        trade = _open(notes="breakout")
        assert trade.status == TradeStatus.OPEN
        assert isinstance(trade.state, OpenState)
        assert str(trade.id).startswith("trade_")
        assert trade.risk_amount == 100.0
        assert trade.stop_loss == Price(value=1.0950)
        assert trade.notes == "breakout"
        assert trade.entry_time.tzinfo is not None

    def test_naive_entry_time_is_utc(self):
        trade = _open(entry_time=datetime(2024, 1, 15, 10, 0))
        assert trade.entry_time == BASE_TIME

    def test_rejects_with_every_violation(self):
        with pytest.raises(TradeRejectedError) as exc_info:
            _open(
                TradeValidator(max_risk_pct=5),
                stop_loss=Price(value=1.1050),
                risk_amount=600.0,
            )
        assert exc_info.value.errors == [
            "Stop loss for BUY trade must be below entry price",
            "Risk amount (6.00%) exceeds recommended maximum of 5%",
        ]
        assert "Stop loss for BUY" in str(exc_info.value)

    def test_rejects_zero_risk(self):
        with pytest.raises(TradeRejectedError) as exc_info:
            _open(risk_amount=0)
        assert exc_info.value.errors == ["Risk amount must be greater than 0"]
