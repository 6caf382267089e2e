"""Business-rule checks for trades.

Rule violations are collected and returned so a caller can show every
problem at once. ``open_trade`` raises them together as one
``TradeRejectedError``.
"""

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from forex_helper.config import settings
from forex_helper.errors import TradeRejectedError
from forex_helper.models.currency import CurrencyPair
from forex_helper.models.sizing import LotSize
from forex_helper.models.timestamps import as_utc, utcnow
from forex_helper.models.trade import Price, Trade, TradeDirection


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(errors=[*self.errors, *other.errors])


class TradeValidator:
    def __init__(self, max_risk_pct: float | None = None):
        self.max_risk_pct = settings.max_risk_pct if max_risk_pct is None else max_risk_pct

    def validate_trade_creation(
        self,
        entry_price: Price,
        stop_loss: Price | None,
        take_profit: Price | None,
        lot_size: LotSize,
        direction: TradeDirection,
    ) -> ValidationResult:
        errors: list[str] = []
        entry = entry_price.value

        if lot_size.value <= 0:
            errors.append("Lot size must be greater than 0")

        if stop_loss is not None:
            if direction == "BUY" and stop_loss.value >= entry:
                errors.append("Stop loss for BUY trade must be below entry price")
            if direction == "SELL" and stop_loss.value <= entry:
                errors.append("Stop loss for SELL trade must be above entry price")

        if take_profit is not None:
            if direction == "BUY" and take_profit.value <= entry:
                errors.append("Take profit for BUY trade must be above entry price")
            if direction == "SELL" and take_profit.value >= entry:
                errors.append("Take profit for SELL trade must be below entry price")

        if stop_loss is not None and take_profit is not None:
            if direction == "BUY" and take_profit.value <= stop_loss.value:
                errors.append("Take profit must be above stop loss for BUY trade")
            if direction == "SELL" and take_profit.value >= stop_loss.value:
                errors.append("Take profit must be below stop loss for SELL trade")

        return ValidationResult(errors)

    def validate_trade_closing(
        self, trade: Trade, exit_price: Price, exit_time: datetime | None = None
    ) -> ValidationResult:
        errors: list[str] = []

        if trade.has_exit():
            errors.append("Cannot close a trade that is not open")
        if exit_price.value <= 0:
            errors.append("Exit price must be greater than 0")
        if exit_time is not None and as_utc(exit_time) < trade.entry_time:
            errors.append("Exit time cannot be before entry time")

        return ValidationResult(errors)

    def validate_risk_amount(self, risk_amount: float, account_balance: float) -> ValidationResult:
        errors: list[str] = []

        if risk_amount <= 0:
            errors.append("Risk amount must be greater than 0")

        if account_balance <= 0:
            errors.append("Account balance must be greater than 0")
            return ValidationResult(errors)

        if risk_amount > account_balance:
            errors.append("Risk amount cannot exceed account balance")

        risk_pct = risk_amount / account_balance * 100
        if risk_pct > self.max_risk_pct:
            errors.append(
                f"Risk amount ({risk_pct:.2f}%) exceeds recommended maximum of {self.max_risk_pct:g}%"
            )

        return ValidationResult(errors)

    def open_trade(
        self,
        user_id: str,
        pair: CurrencyPair,
        direction: TradeDirection,
        entry_price: Price,
        lot_size: LotSize,
        risk_amount: float,
        account_balance: float,
        stop_loss: Price | None = None,
        take_profit: Price | None = None,
        entry_time: datetime | None = None,
        notes: str | None = None,
    ) -> Trade:
        """Create an OPEN trade once placement and risk rules pass.

        Raises:
            TradeRejectedError: with every violated rule, when any fails.
        """
        result = self.validate_trade_creation(
            entry_price, stop_loss, take_profit, lot_size, direction
        ).merge(self.validate_risk_amount(risk_amount, account_balance))
        if not result.is_valid:
            logger.warning(f"Rejected {direction} {pair.code} for {user_id}: {result.errors}")
            raise TradeRejectedError(result.errors)

        trade = Trade(
            user_id=user_id,
            pair=pair,
            direction=direction,
            entry_price=entry_price,
            lot_size=lot_size,
            risk_amount=risk_amount,
            stop_loss=stop_loss,
            take_profit=take_profit,
            entry_time=entry_time or utcnow(),
            notes=notes,
        )
        logger.info(f"Opened {trade.id}: {direction} {lot_size} {pair.code} @ {entry_price}")
        return trade
