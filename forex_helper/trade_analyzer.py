"""Trade Outcome Analyzer — turns realized pips/points into money."""

from datetime import datetime

from loguru import logger

from forex_helper.errors import NotClosedError
from forex_helper.models.currency import AccountCurrency
from forex_helper.models.trade import Price, ProfitLoss, Trade
from forex_helper.pip_value import METAL_POINT_VALUE, PipValueResolver


class TradeOutcomeAnalyzer:
    def __init__(self, pip_value_resolver: PipValueResolver, account_currency: AccountCurrency):
        self.pip_value_resolver = pip_value_resolver
        self.account_currency = account_currency

    async def analyze(self, trade: Trade):
        """Attach profit/loss to an exited trade, which settles its status.

        The entry price stands in for the current price when resolving the
        pip value of USD/XXX pairs.
        """
        if trade.exit_price is None:
            raise NotClosedError("Cannot analyze an open trade")

        profit_loss = await self.profit_loss_for(trade)
        trade.attach_profit_loss(profit_loss)
        logger.debug(f"Trade {trade.id} {trade.pair.code} {trade.direction}: {profit_loss} ({trade.status.value})")

    async def profit_loss_for(self, trade: Trade) -> ProfitLoss:
        if trade.exit_price is None:
            raise NotClosedError("Cannot analyze an open trade")

        lots = trade.lot_size.value
        if trade.points is not None:
            # Gold: fixed value per point per lot, in USD
            amount = trade.points.value * METAL_POINT_VALUE * lots
            return ProfitLoss.of(amount, trade.pair.quote)

        pip_value = await self.pip_value_resolver.resolve(
            trade.pair, self.account_currency, trade.entry_price.value
        )
        amount = (trade.pips.value / 10) * pip_value.for_lot_size(lots)
        return ProfitLoss.of(amount, pip_value.currency)

    async def settle(self, trade: Trade, exit_price: Price, exit_time: datetime | None = None) -> Trade:
        """Close and analyze in one step; the trade is unchanged if either fails."""
        draft = trade.model_copy(deep=True)
        draft.close(exit_price, exit_time)
        await self.analyze(draft)

        trade.state = draft.state
        trade.updated_at = draft.updated_at
        logger.info(f"Settled trade {trade.id}: {trade.status.value} {trade.profit_loss}")
        return trade
