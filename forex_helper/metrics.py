"""Performance metrics — win rate, profit factor, expectancy, drawdown, streaks."""

import math

from loguru import logger

from forex_helper.config import settings
from forex_helper.errors import EmptyInputError, MixedCurrencyError, NoClosedTradesError
from forex_helper.models.metrics import Drawdown, PerformanceMetrics, ProfitFactor, WinRate
from forex_helper.models.trade import ProfitLoss, Trade, TradeStatus


def cumulative_pnl_curve(trades: list[Trade]) -> list[float]:
    """Running total of P/L after each trade, in the order given."""
    curve = []
    running = 0.0
    for t in trades:
        if t.profit_loss is not None:
            running += t.profit_loss.amount
            curve.append(running)
    return curve


def compute_max_drawdown(curve: list[float], currency: str = "USD") -> Drawdown:
    """Largest decline from the running peak of a cumulative P/L curve.

    The peak starts at zero, so drawdown is only measured once cumulative
    P/L has been positive. Ties keep the earliest maximum.
    """
    peak = 0.0
    max_pct = 0.0
    max_amount = 0.0
    for value in curve:
        if value > peak:
            peak = value
        if peak <= 0:
            continue
        pct = (peak - value) / peak * 100
        if pct > max_pct:
            max_pct = pct
            max_amount = peak - value
    return Drawdown(percentage=max_pct, amount=max_amount, currency=currency)


def _longest_streak(trades: list[Trade], status: TradeStatus) -> int:
    longest = 0
    current = 0
    for t in trades:
        if t.status == status:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _chronological(trades: list[Trade]) -> list[Trade]:
    # Stable, so trades sharing an exit time keep input order
    return sorted(trades, key=lambda t: t.exit_time or t.entry_time)


def _mean_abs(trades: list[Trade]) -> float:
    if not trades:
        return 0.0
    return sum(abs(t.profit_loss) for t in trades) / len(trades)


class MetricsAggregator:
    def __init__(self, strict_currency: bool | None = None):
        self.strict_currency = (
            settings.metrics_strict_currency if strict_currency is None else strict_currency
        )

    def calculate(self, trades: list[Trade]) -> PerformanceMetrics:
        """Reduce a trade list to performance metrics over its closed trades.

        Counts, win rate, streaks and risk/reward cover every closed trade.
        Money figures (totals, averages, profit factor, expectancy, drawdown,
        best/worst) cover only trades in the first closed trade's currency.

        Raises:
            EmptyInputError: ``trades`` is empty.
            NoClosedTradesError: none of the trades are closed.
            MixedCurrencyError: closed trades span several currencies
                (strict mode only).
        """
        if not trades:
            raise EmptyInputError("Cannot calculate metrics from empty trade list")

        closed = [t for t in trades if t.is_closed()]
        if not closed:
            raise NoClosedTradesError("Cannot calculate metrics: no closed trades")

        currency = closed[0].profit_loss.currency
        self._check_currencies(closed, currency)
        # Money figures only add up within one currency
        priced = [t for t in closed if t.profit_loss.currency == currency]

        wins = [t for t in closed if t.status == TradeStatus.WIN]
        losses = [t for t in closed if t.status == TradeStatus.LOSS]
        priced_wins = [t for t in priced if t.status == TradeStatus.WIN]
        priced_losses = [t for t in priced if t.status == TradeStatus.LOSS]
        total = len(closed)

        win_rate = WinRate(value=len(wins) / total * 100)
        priced_win_share = len(priced_wins) / len(priced)
        total_pl = self._total_profit_loss(priced, currency)
        avg_win = _mean_abs(priced_wins)
        avg_loss = _mean_abs(priced_losses)
        profit_factor = self._profit_factor(priced)
        expectancy = priced_win_share * avg_win - (1 - priced_win_share) * avg_loss
        drawdown = compute_max_drawdown(cumulative_pnl_curve(_chronological(priced)), currency)

        rr_values = [t.risk_reward_ratio for t in closed if t.risk_reward_ratio is not None]
        avg_rr = sum(rr_values) / len(rr_values) if rr_values else None

        best = self._extreme(priced, profitable=True)
        worst = self._extreme(priced, profitable=False)

        metrics = PerformanceMetrics(
            total_trades=total,
            winning_trades=len(wins),
            losing_trades=len(losses),
            break_even_trades=total - len(wins) - len(losses),
            win_rate=win_rate,
            total_profit_loss=total_pl,
            average_win=avg_win,
            average_loss=avg_loss,
            profit_factor=profit_factor,
            expectancy=expectancy,
            maximum_drawdown=drawdown,
            average_risk_reward_ratio=avg_rr,
            best_trade=best.profit_loss if best else None,
            best_trade_id=str(best.id) if best else None,
            worst_trade=worst.profit_loss if worst else None,
            worst_trade_id=str(worst.id) if worst else None,
            longest_winning_streak=_longest_streak(closed, TradeStatus.WIN),
            longest_losing_streak=_longest_streak(closed, TradeStatus.LOSS),
        )
        logger.debug(
            f"Metrics over {total} trades: win rate {win_rate}, total {total_pl}, PF {profit_factor}"
        )
        return metrics

    def _check_currencies(self, closed: list[Trade], currency: str):
        others = sorted({t.profit_loss.currency for t in closed} - {currency})
        if not others:
            return
        if self.strict_currency:
            raise MixedCurrencyError(
                f"Trades mix profit/loss currencies: {', '.join([currency, *others])}"
            )
        skipped = sum(1 for t in closed if t.profit_loss.currency != currency)
        logger.warning(f"Excluding {skipped} trade(s) not in {currency} from money figures")

    @staticmethod
    def _total_profit_loss(closed: list[Trade], currency: str) -> ProfitLoss:
        amount = math.fsum(
            t.profit_loss.amount for t in closed if t.profit_loss.currency == currency
        )
        return ProfitLoss.of(amount, currency)

    @staticmethod
    def _profit_factor(closed: list[Trade]) -> ProfitFactor:
        gross_profit = sum(t.profit_loss.amount for t in closed if t.profit_loss.is_profit())
        gross_loss = sum(abs(t.profit_loss) for t in closed if t.profit_loss.is_loss())
        if gross_loss == 0:
            return ProfitFactor(value=math.inf if gross_profit > 0 else 0.0)
        return ProfitFactor(value=gross_profit / gross_loss)

    @staticmethod
    def _extreme(closed: list[Trade], profitable: bool) -> Trade | None:
        chosen: Trade | None = None
        for t in closed:
            pl = t.profit_loss
            if profitable and pl.is_profit():
                if chosen is None or pl.amount > chosen.profit_loss.amount:
                    chosen = t
            elif not profitable and pl.is_loss():
                if chosen is None or pl.amount < chosen.profit_loss.amount:
                    chosen = t
        return chosen
