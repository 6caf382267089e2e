"""Performance metrics models."""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from forex_helper.models.currency import normalize_currency_code
from forex_helper.models.scalar import ScalarValue
from forex_helper.models.timestamps import UtcDatetime, utcnow
from forex_helper.models.trade import ProfitLoss


class WinRate(ScalarValue):
    value: float  # 0-100

    @field_validator("value")
    @classmethod
    def _in_range(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0 or v > 100:
            raise ValueError("Win rate must be between 0 and 100")
        return v

    @property
    def decimal(self) -> float:
        return self.value / 100

    def __str__(self) -> str:
        return f"{self.value:.2f}%"


class ProfitFactor(ScalarValue):
    """Gross profit over gross loss. ``inf`` when there are profits but no losses."""

    value: float

    @field_validator("value")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("Profit factor must be a number")
        if v < 0:
            raise ValueError("Profit factor cannot be negative")
        return v

    @property
    def is_infinite(self) -> bool:
        return math.isinf(self.value)

    def is_profitable(self) -> bool:
        return self.value > 1.0

    @property
    def rating(self) -> Literal["excellent", "good", "fair", "poor"]:
        if self.value >= 2.0:
            return "excellent"
        if self.value >= 1.5:
            return "good"
        if self.value >= 1.0:
            return "fair"
        return "poor"

    def __str__(self) -> str:
        return "inf" if self.is_infinite else f"{self.value:.2f}"


class Drawdown(BaseModel):
    """Largest peak-to-trough decline of cumulative P/L.

    ``percentage`` is relative to the cumulative-profit peak, so it can
    exceed 100 when equity falls below the starting point.
    """

    model_config = ConfigDict(frozen=True)

    percentage: float = 0.0
    amount: float = 0.0
    currency: str = "USD"

    @field_validator("percentage")
    @classmethod
    def _pct(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("Drawdown percentage cannot be negative")
        return v

    @field_validator("amount")
    @classmethod
    def _amount(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("Drawdown amount cannot be negative")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        return normalize_currency_code(v)

    def is_significant(self) -> bool:
        return self.percentage > 20

    def __str__(self) -> str:
        return f"{self.percentage:.2f}% ({self.currency} {self.amount:.2f})"


class PerformanceMetrics(BaseModel):
    total_trades: int
    winning_trades: int
    losing_trades: int
    break_even_trades: int = 0
    win_rate: WinRate
    total_profit_loss: ProfitLoss
    average_win: float = 0.0
    average_loss: float = 0.0
    profit_factor: ProfitFactor
    expectancy: float = 0.0
    maximum_drawdown: Drawdown
    average_risk_reward_ratio: float | None = None
    best_trade: ProfitLoss | None = None
    best_trade_id: str | None = None
    worst_trade: ProfitLoss | None = None
    worst_trade_id: str | None = None
    longest_winning_streak: int = 0
    longest_losing_streak: int = 0
    calculated_at: UtcDatetime = Field(default_factory=utcnow)
