"""Response shaping. Rounding happens here and nowhere in the engine."""

from typing import Any

from forex_helper.models.metrics import PerformanceMetrics
from forex_helper.models.report import TradingReport
from forex_helper.models.sizing import PositionSizeResult
from forex_helper.models.trade import Trade

MONEY_DP = 2
LOT_DP = 2
PIP_VALUE_DP = 5
RATIO_DP = 2


def _round(value: float | None, dp: int) -> float | None:
    return None if value is None else round(value, dp)


def present_calculation(result: PositionSizeResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "lot_size": round(result.lot_size.value, LOT_DP),
        "lot_type": result.lot_size.lot_type,
        "position_size": round(result.position_size),
        "risk_amount": round(result.risk_amount, MONEY_DP),
        "account_balance": result.account_balance.amount,
        "account_currency": result.account_currency.code,
        "risk_percentage": result.risk_percentage.value,
        "currency_pair": result.pair.code,
        "stop_loss": result.stop_distance.value,
        "stop_loss_unit": result.stop_distance.unit,
        "pip_value": round(result.pip_value.value, PIP_VALUE_DP),
        "pip_value_currency": result.pip_value.currency,
        "current_price": result.current_price,
        "calculated_at": result.calculated_at.isoformat(),
    }


def present_trade(trade: Trade) -> dict[str, Any]:
    pl = trade.profit_loss
    movement = trade.movement
    return {
        "id": str(trade.id),
        "user_id": trade.user_id,
        "pair": trade.pair.code,
        "direction": trade.direction,
        "entry_price": trade.entry_price.value,
        "exit_price": trade.exit_price.value if trade.exit_price else None,
        "lot_size": trade.lot_size.value,
        "stop_loss": trade.stop_loss.value if trade.stop_loss else None,
        "take_profit": trade.take_profit.value if trade.take_profit else None,
        "pips": _round(trade.pips.value, 1) if trade.pips else None,
        "points": _round(trade.points.value, 1) if trade.points else None,
        "movement_unit": movement.unit if movement else None,
        "profit_loss": _round(pl.amount, MONEY_DP) if pl else None,
        "profit_loss_currency": pl.currency if pl else None,
        "risk_amount": trade.risk_amount,
        "risk_reward_ratio": _round(trade.risk_reward_ratio, RATIO_DP),
        "status": trade.status.value,
        "entry_time": trade.entry_time.isoformat(),
        "exit_time": trade.exit_time.isoformat() if trade.exit_time else None,
        "notes": trade.notes,
        "created_at": trade.created_at.isoformat(),
        "updated_at": trade.updated_at.isoformat(),
    }


def present_metrics(m: PerformanceMetrics) -> dict[str, Any]:
    pf = m.profit_factor
    return {
        "total_trades": m.total_trades,
        "winning_trades": m.winning_trades,
        "losing_trades": m.losing_trades,
        "break_even_trades": m.break_even_trades,
        "win_rate": round(m.win_rate.value, 1),
        "total_profit_loss": round(m.total_profit_loss.amount, MONEY_DP),
        "profit_loss_currency": m.total_profit_loss.currency,
        "average_win": round(m.average_win, MONEY_DP),
        "average_loss": round(m.average_loss, MONEY_DP),
        # JSON has no infinity; flag it instead
        "profit_factor": None if pf.is_infinite else round(pf.value, RATIO_DP),
        "profit_factor_infinite": pf.is_infinite,
        "profit_factor_rating": pf.rating,
        "profitable": pf.is_profitable(),
        "expectancy": round(m.expectancy, MONEY_DP),
        "maximum_drawdown": round(m.maximum_drawdown.amount, MONEY_DP),
        "maximum_drawdown_percentage": round(m.maximum_drawdown.percentage, RATIO_DP),
        "maximum_drawdown_currency": m.maximum_drawdown.currency,
        "maximum_drawdown_significant": m.maximum_drawdown.is_significant(),
        "average_risk_reward_ratio": _round(m.average_risk_reward_ratio, RATIO_DP),
        "best_trade": _round(m.best_trade.amount, MONEY_DP) if m.best_trade else None,
        "best_trade_id": m.best_trade_id,
        "worst_trade": _round(m.worst_trade.amount, MONEY_DP) if m.worst_trade else None,
        "worst_trade_id": m.worst_trade_id,
        "longest_winning_streak": m.longest_winning_streak,
        "longest_losing_streak": m.longest_losing_streak,
        "calculated_at": m.calculated_at.isoformat(),
    }


def present_report(report: TradingReport) -> dict[str, Any]:
    return {
        "id": report.id,
        "user_id": report.user_id,
        "start_date": report.start_date.isoformat(),
        "end_date": report.end_date.isoformat(),
        "created_at": report.created_at.isoformat(),
        "trade_count": report.trade_count,
        "metrics": present_metrics(report.metrics),
        "trades": [present_trade(t) for t in report.trades],
    }
