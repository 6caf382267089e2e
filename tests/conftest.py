"""Shared test fixtures for engine and API tests."""

from datetime import datetime, timedelta, timezone

import pytest

from forex_helper.models.currency import AccountCurrency
from forex_helper.models.trade import Price, ProfitLoss, Trade
from forex_helper.pip_value import PipValueResolver
from forex_helper.rates import StaticRateProvider

BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def make_trade(
    pnl=None,
    pair="EURUSD",
    direction="BUY",
    entry_price=1.1000,
    exit_price=None,
    lot_size=1.0,
    stop_loss=None,
    take_profit=None,
    entry_time=None,
    exit_time=None,
    currency="USD",
    user_id="user-1",
    **kwargs,
) -> Trade:
    """Build a trade, closed when ``exit_price`` is given and settled when ``pnl`` is.

    A ``pnl`` without an exit price closes the trade at its entry price.
    """
    trade = Trade(
        user_id=user_id,
        pair=pair,
        direction=direction,
        entry_price=entry_price,
        lot_size=lot_size,
        stop_loss=stop_loss,
        take_profit=take_profit,
        entry_time=entry_time or BASE_TIME,
        **kwargs,
    )
    if exit_price is None and pnl is not None:
        exit_price = entry_price
    if exit_price is not None:
        trade.close(Price(value=exit_price), exit_time or trade.entry_time + timedelta(hours=4))
    if pnl is not None:
        trade.attach_profit_loss(ProfitLoss(amount=pnl, currency=currency))
    return trade


@pytest.fixture
def rates():
    return StaticRateProvider({
        "EURUSD": 1.25,
        "GBPUSD": 1.25,
        "USDJPY": 150.0,
        "EURJPY": 160.0,
    })


@pytest.fixture
def resolver(rates):
    return PipValueResolver(rates)


@pytest.fixture
def usd():
    return AccountCurrency(code="USD")


@pytest.fixture
def winning_trades():
    """3 winning trades on consecutive days."""
    return [
        make_trade(pnl=100.0, entry_time=BASE_TIME),
        make_trade(pnl=200.0, entry_time=BASE_TIME + timedelta(days=1)),
        make_trade(pnl=150.0, entry_time=BASE_TIME + timedelta(days=2)),
    ]


@pytest.fixture
def mixed_trades():
    """Alternating wins and losses."""
    return [
        make_trade(pnl=100.0, entry_time=BASE_TIME),
        make_trade(pnl=-50.0, entry_time=BASE_TIME + timedelta(days=1)),
        make_trade(pnl=200.0, entry_time=BASE_TIME + timedelta(days=2)),
        make_trade(pnl=-75.0, entry_time=BASE_TIME + timedelta(days=3)),
    ]
