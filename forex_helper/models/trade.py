"""Trade entity and its value types.

A trade moves through three lifecycle phases, held as a tagged union so a
settled trade always carries its profit/loss:

    open  --close()-->  exited  --attach_profit_loss()-->  settled

``status`` stays OPEN until profit/loss is attached, then becomes WIN, LOSS
or BREAK_EVEN. After settlement only ``notes`` may change.
"""

import math
import secrets
import time
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from forex_helper.errors import InvalidStateError, NotClosedError, OwnershipError
from forex_helper.models.currency import CurrencyPair, normalize_currency_code
from forex_helper.models.scalar import ScalarValue
from forex_helper.models.sizing import DistanceUnit, LotSize
from forex_helper.models.timestamps import UtcDatetime, utcnow
from forex_helper.tolerance import approx_equal, is_negligible


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    WIN = "WIN"
    LOSS = "LOSS"
    BREAK_EVEN = "BREAK_EVEN"


TradeDirection = Literal["BUY", "SELL"]


class TradeId(ScalarValue):
    value: str

    @field_validator("value")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Trade ID cannot be empty")
        return v.strip()

    @classmethod
    def generate(cls) -> "TradeId":
        return cls(value=f"trade_{int(time.time() * 1000)}_{secrets.token_hex(5)}")

    def __str__(self) -> str:
        return self.value


class Price(ScalarValue):
    value: float

    @field_validator("value")
    @classmethod
    def _valid(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Price must be a finite number")
        if v < 0:
            raise ValueError("Price cannot be negative")
        return v

    def difference_from(self, other: "Price") -> float:
        """Absolute distance between two prices."""
        return abs(self.value - other.value)

    def __str__(self) -> str:
        return f"{self.value:.5f}"


class Pips(BaseModel):
    """Signed realized movement in pips (forex) or points (gold)."""

    model_config = ConfigDict(frozen=True)

    value: float
    unit: DistanceUnit = "pips"

    @field_validator("value")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Pips value must be a finite number")
        return v

    def __abs__(self) -> float:
        return abs(self.value)

    def __str__(self) -> str:
        return f"{self.value:+.2f} {self.unit}"


class ProfitLoss(BaseModel):
    """Signed money amount: positive is profit, negative is loss."""

    model_config = ConfigDict(frozen=True)

    amount: float
    currency: str

    @field_validator("amount")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Profit/Loss amount must be a finite number")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        return normalize_currency_code(v)

    @classmethod
    def profit(cls, amount: float, currency: str) -> "ProfitLoss":
        if amount < 0:
            raise ValueError("Profit amount cannot be negative")
        return cls(amount=amount, currency=currency)

    @classmethod
    def loss(cls, amount: float, currency: str) -> "ProfitLoss":
        if amount > 0:
            raise ValueError("Loss amount cannot be positive")
        return cls(amount=amount, currency=currency)

    @classmethod
    def of(cls, amount: float, currency: str) -> "ProfitLoss":
        """Profit or loss depending on the sign of ``amount``."""
        return cls.profit(amount, currency) if amount >= 0 else cls.loss(amount, currency)

    def is_break_even(self) -> bool:
        return is_negligible(self.amount, "money")

    def is_profit(self) -> bool:
        return self.amount > 0

    def is_loss(self) -> bool:
        return self.amount < 0

    @property
    def outcome(self) -> TradeStatus:
        if self.is_break_even():
            return TradeStatus.BREAK_EVEN
        return TradeStatus.WIN if self.is_profit() else TradeStatus.LOSS

    def __abs__(self) -> float:
        return abs(self.amount)

    def __add__(self, other: "ProfitLoss") -> "ProfitLoss":
        if self.currency != other.currency:
            raise ValueError("Cannot add profit/loss with different currencies")
        return ProfitLoss(amount=self.amount + other.amount, currency=self.currency)

    def __str__(self) -> str:
        sign = "+" if self.amount >= 0 else ""
        return f"{sign}{self.currency} {self.amount:.2f}"


# ── Lifecycle phases ────────────────────────────────────────────────

class OpenState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["open"] = "open"


class ExitedState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["exited"] = "exited"
    exit_price: Price
    exit_time: UtcDatetime
    movement: Pips
    risk_reward_ratio: float | None = None


class SettledState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["settled"] = "settled"
    exit_price: Price
    exit_time: UtcDatetime
    movement: Pips
    risk_reward_ratio: float | None = None
    profit_loss: ProfitLoss

    @property
    def outcome(self) -> TradeStatus:
        return self.profit_loss.outcome


TradeState = Annotated[
    Union[OpenState, ExitedState, SettledState],
    Field(discriminator="phase"),
]


class Trade(BaseModel):
    id: TradeId = Field(default_factory=TradeId.generate)
    user_id: str
    pair: CurrencyPair
    direction: TradeDirection
    entry_price: Price
    lot_size: LotSize
    risk_amount: float = 0.0
    stop_loss: Price | None = None
    take_profit: Price | None = None
    entry_time: UtcDatetime = Field(default_factory=utcnow)
    notes: str | None = None
    state: TradeState = Field(default_factory=OpenState)
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)

    # ── Transitions ────────────────────────────────────────────────

    def close(self, exit_price: Price, exit_time: datetime | None = None):
        """Record the exit and realized pips/points.

        Raises InvalidStateError if an exit was already recorded; the
        earlier exit is left untouched.
        """
        if not isinstance(self.state, OpenState):
            raise InvalidStateError(f"Trade {self.id} is already closed")

        new_state = ExitedState(
            exit_price=exit_price,
            exit_time=exit_time or utcnow(),
            movement=self._movement_to(exit_price),
            risk_reward_ratio=self._planned_risk_reward(),
        )
        self.state = new_state
        self._touch()

    def attach_profit_loss(self, profit_loss: ProfitLoss):
        """Settle an exited trade; status follows from the amount."""
        state = self.state
        if isinstance(state, OpenState):
            raise NotClosedError(f"Trade {self.id} has no exit price")
        if isinstance(state, SettledState):
            raise InvalidStateError(f"Trade {self.id} already has a profit/loss")

        self.state = SettledState(
            exit_price=state.exit_price,
            exit_time=state.exit_time,
            movement=state.movement,
            risk_reward_ratio=state.risk_reward_ratio,
            profit_loss=profit_loss,
        )
        self._touch()

    def update_notes(self, notes: str | None):
        self.notes = notes
        self._touch()

    def ensure_owned_by(self, user_id: str):
        if self.user_id != user_id:
            raise OwnershipError(f"Trade {self.id} does not belong to user {user_id}")

    # ── Derived values ─────────────────────────────────────────────

    def _movement_to(self, exit_price: Price) -> Pips:
        # Positive when price moved in the trade's favour
        favourable = (
            exit_price.value > self.entry_price.value
            if self.direction == "BUY"
            else exit_price.value < self.entry_price.value
        )
        sign = 1 if favourable else -1
        distance = exit_price.difference_from(self.entry_price)

        if self.pair.is_metal():
            return Pips(value=sign * distance * 100, unit="points")

        multiplier = 100 if self.pair.is_jpy_quoted() else 10_000
        return Pips(value=sign * distance * multiplier, unit="pips")

    def _planned_risk_reward(self) -> float | None:
        if self.stop_loss is None or self.take_profit is None:
            return None
        # Stop within a price tick of entry leaves no measurable risk
        if approx_equal(self.entry_price.value, self.stop_loss.value, "price"):
            return None
        risk = self.entry_price.difference_from(self.stop_loss)
        return self.entry_price.difference_from(self.take_profit) / risk

    def _touch(self):
        self.updated_at = utcnow()

    # ── Accessors ──────────────────────────────────────────────────

    @property
    def status(self) -> TradeStatus:
        if isinstance(self.state, SettledState):
            return self.state.outcome
        return TradeStatus.OPEN

    @property
    def exit_price(self) -> Price | None:
        return getattr(self.state, "exit_price", None)

    @property
    def exit_time(self) -> datetime | None:
        return getattr(self.state, "exit_time", None)

    @property
    def movement(self) -> Pips | None:
        return getattr(self.state, "movement", None)

    @property
    def pips(self) -> Pips | None:
        m = self.movement
        return m if m is not None and m.unit == "pips" else None

    @property
    def points(self) -> Pips | None:
        m = self.movement
        return m if m is not None and m.unit == "points" else None

    @property
    def risk_reward_ratio(self) -> float | None:
        return getattr(self.state, "risk_reward_ratio", None)

    @property
    def profit_loss(self) -> ProfitLoss | None:
        return getattr(self.state, "profit_loss", None)

    def has_exit(self) -> bool:
        return not isinstance(self.state, OpenState)

    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    def is_closed(self) -> bool:
        return self.status != TradeStatus.OPEN

    def is_win(self) -> bool:
        return self.status == TradeStatus.WIN

    def is_loss(self) -> bool:
        return self.status == TradeStatus.LOSS
