"""Position Size Engine — lot size from balance, risk and stop distance."""

import secrets
import time

from loguru import logger

from forex_helper.errors import DivisionByZeroError
from forex_helper.models.currency import AccountCurrency, CurrencyPair
from forex_helper.models.sizing import (
    AccountBalance,
    LotSize,
    PositionSizeResult,
    RiskPercentage,
    StopDistance,
)
from forex_helper.pip_value import PipValueResolver


def _calculation_id() -> str:
    return f"calc_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class PositionSizeEngine:
    def __init__(self, pip_value_resolver: PipValueResolver):
        self.pip_value_resolver = pip_value_resolver

    async def size(
        self,
        account_balance: AccountBalance,
        risk_percentage: RiskPercentage,
        stop_distance: StopDistance,
        pair: CurrencyPair,
        account_currency: AccountCurrency,
        current_price: float | None = None,
    ) -> PositionSizeResult:
        """Lot size = risk amount / (stop distance x pip value per lot)."""
        expected_unit = "points" if pair.is_metal() else "pips"
        if stop_distance.unit != expected_unit:
            logger.warning(
                f"Stop distance for {pair.code} given in {stop_distance.unit}, expected {expected_unit}"
            )

        risk_amount = risk_percentage.risk_amount(account_balance.amount)
        pip_value = await self.pip_value_resolver.resolve(pair, account_currency, current_price)

        denominator = stop_distance.value * pip_value.value
        if denominator == 0:
            raise DivisionByZeroError("Stop loss and pip value must be greater than 0")

        lot_size = LotSize(value=risk_amount / denominator)
        result = PositionSizeResult(
            id=_calculation_id(),
            lot_size=lot_size,
            position_size=lot_size.to_units(),
            risk_amount=risk_amount,
            account_balance=account_balance,
            risk_percentage=risk_percentage,
            pair=pair,
            account_currency=account_currency,
            stop_distance=stop_distance,
            pip_value=pip_value,
            current_price=current_price,
        )
        logger.debug(
            f"Sized {pair.code}: risk {risk_amount:.2f} {account_currency.code}, "
            f"stop {stop_distance}, pip {pip_value} -> {lot_size}"
        )
        return result
