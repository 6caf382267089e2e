"""Value types and result model for position sizing."""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from forex_helper.models.currency import AccountCurrency, CurrencyPair, normalize_currency_code
from forex_helper.models.scalar import ScalarValue
from forex_helper.models.timestamps import UtcDatetime, utcnow

DistanceUnit = Literal["pips", "points"]

STANDARD_LOT_UNITS = 100_000


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{what} must be a finite number")
    return value


class AccountBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float
    currency: str

    @field_validator("amount")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        _finite(v, "Account balance")
        if v < 0:
            raise ValueError("Account balance cannot be negative")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        return normalize_currency_code(v)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"


class RiskPercentage(ScalarValue):
    """Share of the balance put at risk, 0-100."""

    value: float

    @field_validator("value")
    @classmethod
    def _in_range(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0 or v > 100:
            raise ValueError("Risk percentage must be between 0 and 100")
        return v

    @property
    def decimal(self) -> float:
        return self.value / 100

    def risk_amount(self, balance: float) -> float:
        return balance * self.decimal

    def __str__(self) -> str:
        return f"{self.value}%"


class StopDistance(BaseModel):
    """Stop-loss distance in pips (forex) or points (gold)."""

    model_config = ConfigDict(frozen=True)

    value: float
    unit: DistanceUnit = "pips"

    @field_validator("value")
    @classmethod
    def _positive(cls, v: float) -> float:
        _finite(v, "Stop loss")
        if v <= 0:
            raise ValueError("Stop loss must be greater than 0")
        return v

    @classmethod
    def in_pips(cls, value: float) -> "StopDistance":
        return cls(value=value, unit="pips")

    @classmethod
    def in_points(cls, value: float) -> "StopDistance":
        return cls(value=value, unit="points")

    def __str__(self) -> str:
        return f"{self.value} {self.unit}"


class LotSize(ScalarValue):
    value: float

    @field_validator("value")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        _finite(v, "Lot size")
        if v < 0:
            raise ValueError("Lot size cannot be negative")
        return v

    def to_units(self, contract_size: int = STANDARD_LOT_UNITS) -> float:
        return self.value * contract_size

    @property
    def lot_type(self) -> Literal["standard", "mini", "micro", "fractional"]:
        if self.value >= 1:
            return "standard"
        if self.value >= 0.1:
            return "mini"
        if self.value >= 0.01:
            return "micro"
        return "fractional"

    def __str__(self) -> str:
        return f"{self.value:.2f} lot{'' if self.value == 1 else 's'}"


class PipValue(BaseModel):
    """Value of one pip (or gold point) per standard lot, in ``currency``."""

    model_config = ConfigDict(frozen=True)

    value: float
    currency: str

    @field_validator("value")
    @classmethod
    def _positive(cls, v: float) -> float:
        _finite(v, "Pip value")
        if v <= 0:
            raise ValueError("Pip value must be greater than 0")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        return normalize_currency_code(v)

    def for_lot_size(self, lots: float) -> float:
        return self.value * lots

    def __str__(self) -> str:
        return f"{self.currency} {self.value:.2f} per lot"


class PositionSizeResult(BaseModel):
    """Outcome of a sizing run, with every input kept for audit."""

    id: str
    lot_size: LotSize
    position_size: float  # units of base currency
    risk_amount: float
    account_balance: AccountBalance
    risk_percentage: RiskPercentage
    pair: CurrencyPair
    account_currency: AccountCurrency
    stop_distance: StopDistance
    pip_value: PipValue
    current_price: float | None = None
    calculated_at: UtcDatetime = Field(default_factory=utcnow)
