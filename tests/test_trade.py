"""Tests for forex_helper.models.trade — the trade lifecycle."""

from datetime import datetime, timedelta

import pytest

from forex_helper.errors import InvalidStateError, NotClosedError, OwnershipError
from forex_helper.models.trade import (
    ExitedState,
    OpenState,
    Price,
    ProfitLoss,
    SettledState,
    Trade,
    TradeStatus,
)
from tests.conftest import BASE_TIME, make_trade


# ── Closing ────────────────────────────────────────────────────────

class TestClose:
    def test_buy_in_profit(self):
        trade = make_trade(entry_price=1.1000, exit_price=1.1050)
        assert trade.pips.value == pytest.approx(50.0)
        assert trade.points is None
        assert trade.pips.unit == "pips"

    def test_sell_against(self):
        trade = make_trade(direction="SELL", entry_price=1.1000, exit_price=1.1050)
        assert trade.pips.value == pytest.approx(-50.0)

    def test_sell_in_profit(self):
        trade = make_trade(direction="SELL", entry_price=1.1000, exit_price=1.0980)
        assert trade.pips.value == pytest.approx(20.0)

    def test_jpy_multiplier(self):
        trade = make_trade(pair="USDJPY", entry_price=150.00, exit_price=150.50)
        assert trade.pips.value == pytest.approx(50.0)

    def test_gold_points_signed(self):
        buy = make_trade(pair="XAUUSD", entry_price=2000.0, exit_price=2010.0)
        sell = make_trade(pair="XAUUSD", direction="SELL", entry_price=2000.0, exit_price=2010.0)
        assert buy.points.value == pytest.approx(1000.0)
        assert sell.points.value == pytest.approx(-1000.0)
        assert buy.pips is None

    def test_exit_at_entry(self):
        assert make_trade(exit_price=1.1000).pips.value == 0

    def test_status_open_until_settled(self):
        trade = make_trade(exit_price=1.1050)
        assert isinstance(trade.state, ExitedState)
        assert trade.status == TradeStatus.OPEN
        assert trade.has_exit()
        assert not trade.is_closed()
        assert trade.profit_loss is None

    def test_records_exit(self):
        exit_time = BASE_TIME + timedelta(hours=2)
        trade = make_trade(exit_price=1.1050, exit_time=exit_time)
        assert trade.exit_price == Price(value=1.1050)
        assert trade.exit_time == exit_time
        assert trade.updated_at >= trade.created_at

    def test_defaults_exit_time(self):
        trade = make_trade()
        trade.close(Price(value=1.1010))
        assert trade.exit_time is not None

    def test_naive_exit_time_is_utc(self):
        trade = make_trade()
        trade.close(Price(value=1.1010), datetime(2024, 1, 15, 14, 0))
        assert trade.exit_time == BASE_TIME + timedelta(hours=4)
        assert trade.exit_time.utcoffset() == timedelta(0)

    def test_naive_entry_time_is_utc(self):
        trade = make_trade(entry_time=datetime(2024, 1, 15, 10, 0))
        assert trade.entry_time == BASE_TIME

    def test_second_close_rejected(self):
        trade = make_trade(exit_price=1.1050)
        with pytest.raises(InvalidStateError):
            trade.close(Price(value=1.2000))
        assert trade.exit_price.value == 1.1050
        assert trade.pips.value == pytest.approx(50.0)

    def test_close_after_settle_rejected(self):
        trade = make_trade(pnl=25.0)
        with pytest.raises(InvalidStateError):
            trade.close(Price(value=1.2000))


# ── Risk/reward ────────────────────────────────────────────────────

class TestRiskReward:
    def test_buy(self):
        trade = make_trade(stop_loss=1.0950, take_profit=1.1100, exit_price=1.1100)
        assert trade.risk_reward_ratio == pytest.approx(2.0)

    def test_sell(self):
        trade = make_trade(
            direction="SELL", stop_loss=1.1030, take_profit=1.0910, exit_price=1.0910,
        )
        assert trade.risk_reward_ratio == pytest.approx(3.0)

    def test_missing_take_profit(self):
        assert make_trade(stop_loss=1.0950, exit_price=1.1).risk_reward_ratio is None

    def test_stop_at_entry(self):
        assert make_trade(stop_loss=1.1000, take_profit=1.1100, exit_price=1.1).risk_reward_ratio is None

    def test_stop_within_price_tick(self):
        trade = make_trade(stop_loss=1.10005, take_profit=1.1100, exit_price=1.1)
        assert trade.risk_reward_ratio is None

    def test_open_trade_has_none(self):
        assert make_trade(stop_loss=1.0950, take_profit=1.1100).risk_reward_ratio is None


# ── Settlement ─────────────────────────────────────────────────────

class TestSettlement:
    @pytest.mark.parametrize("amount,status", [
        (50.0, TradeStatus.WIN),
        (-20.0, TradeStatus.LOSS),
        (0.004, TradeStatus.BREAK_EVEN),
    ])
    def test_status_follows_amount(self, amount, status):
        trade = make_trade(pnl=amount)
        assert isinstance(trade.state, SettledState)
        assert trade.status == status
        assert trade.is_closed()

    def test_attach_to_open_trade(self):
        with pytest.raises(NotClosedError):
            make_trade().attach_profit_loss(ProfitLoss(amount=10, currency="USD"))

    def test_attach_twice(self):
        trade = make_trade(pnl=10.0)
        with pytest.raises(InvalidStateError):
            trade.attach_profit_loss(ProfitLoss(amount=-5, currency="USD"))
        assert trade.profit_loss.amount == 10.0
        assert trade.is_win()

    def test_settlement_keeps_exit(self):
        trade = make_trade(exit_price=1.1050, stop_loss=1.0950, take_profit=1.1100)
        trade.attach_profit_loss(ProfitLoss(amount=50, currency="USD"))
        assert trade.exit_price.value == 1.1050
        assert trade.pips.value == pytest.approx(50.0)
        assert trade.risk_reward_ratio == pytest.approx(2.0)

    def test_notes_editable_after_settlement(self):
        trade = make_trade(pnl=-5.0)
        trade.update_notes("moved stop too early")
        assert trade.notes == "moved stop too early"
        assert trade.is_loss()


# ── Identity and serialization ─────────────────────────────────────

class TestTradeModel:
    def test_new_trade_is_open(self):
        trade = Trade(user_id="u1", pair="eur/usd", direction="BUY", entry_price=1.1, lot_size=0.1)
        assert isinstance(trade.state, OpenState)
        assert trade.is_open()
        assert trade.pair.code == "EURUSD"
        assert str(trade.id).startswith("trade_")

    def test_ownership(self):
        trade = make_trade(user_id="alice")
        trade.ensure_owned_by("alice")
        with pytest.raises(OwnershipError):
            trade.ensure_owned_by("bob")

    def test_settled_trade_survives_json(self):
        trade = make_trade(pnl=42.0, stop_loss=1.0950, take_profit=1.1100)
        restored = Trade.model_validate(trade.model_dump(mode="json"))
        assert restored.id == trade.id
        assert restored.status == TradeStatus.WIN
        assert restored.profit_loss == trade.profit_loss
        assert restored.pair == trade.pair
        assert restored.entry_price == trade.entry_price

    def test_rejects_bad_direction(self):
        with pytest.raises(ValueError):
            make_trade(direction="LONG")
