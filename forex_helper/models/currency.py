"""Currency pair and account currency value types, plus the pair catalogue."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_serializer, model_validator


class PairType(str, Enum):
    MAJOR = "major"
    CROSS = "cross"
    METAL = "metal"


MAJOR_PAIRS = ("EURUSD", "GBPUSD", "AUDUSD", "NZDUSD", "USDJPY", "USDCHF", "USDCAD")
CROSS_PAIRS = (
    "EURJPY", "EURGBP", "EURCHF", "GBPJPY", "GBPCHF",
    "AUDJPY", "AUDCHF", "CADJPY", "CHFJPY", "NZDJPY",
)
METAL_PAIRS = ("XAUUSD",)

SUPPORTED_ACCOUNT_CURRENCIES = ("USD", "EUR", "JPY", "GBP", "AUD", "CAD", "CHF", "NZD", "IDR")


def normalize_currency_code(value: Any) -> str:
    """Upper-case a 3-letter currency code, rejecting anything else."""
    if not isinstance(value, str) or len(value.strip()) != 3:
        raise ValueError("Currency must be a 3-letter code (e.g., USD, EUR)")
    return value.strip().upper()


class CurrencyPair(BaseModel):
    """A tradable instrument, stored as its 6-letter code (``EURUSD``).

    Accepts ``"eur/usd"``-style input. Serializes back to the bare code.
    """

    model_config = ConfigDict(frozen=True)

    code: str

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"code": data}
        return data

    @field_validator("code", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Currency pair must be a string")
        normalized = v.strip().upper().replace("/", "")
        if len(normalized) != 6 or not normalized.isalpha():
            raise ValueError(
                f"Invalid currency pair format: {v}. Expected format: XXXYYY (e.g., EURUSD)"
            )
        return normalized

    @model_serializer
    def _serialize(self) -> str:
        return self.code

    @classmethod
    def parse(cls, pair: str) -> "CurrencyPair":
        return cls(code=pair)

    @property
    def base(self) -> str:
        return self.code[:3]

    @property
    def quote(self) -> str:
        return self.code[3:]

    @property
    def pair_type(self) -> PairType:
        if self.code in METAL_PAIRS:
            return PairType.METAL
        # Unlisted pairs follow their legs: a USD leg makes a major
        if self.code in MAJOR_PAIRS or "USD" in (self.base, self.quote):
            return PairType.MAJOR
        return PairType.CROSS

    def is_metal(self) -> bool:
        return self.pair_type == PairType.METAL

    def is_usd_quoted(self) -> bool:
        """XXX/USD, e.g. EURUSD."""
        return self.quote == "USD" and self.base != "USD" and not self.is_metal()

    def is_usd_based(self) -> bool:
        """USD/XXX, e.g. USDJPY."""
        return self.base == "USD" and self.quote != "USD"

    def is_cross(self) -> bool:
        """Neither leg is USD."""
        return self.base != "USD" and self.quote != "USD" and not self.is_metal()

    def is_jpy_quoted(self) -> bool:
        return self.quote == "JPY"

    @property
    def display_name(self) -> str:
        return f"{self.base}/{self.quote}"

    def __str__(self) -> str:
        return self.code


class AccountCurrency(BaseModel):
    """Currency an account is denominated in. Serializes to the bare code."""

    model_config = ConfigDict(frozen=True)

    code: str

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"code": data}
        return data

    @field_validator("code", mode="before")
    @classmethod
    def _supported(cls, v: Any) -> str:
        if not isinstance(v, str) or not cls.is_supported(v):
            raise ValueError(
                f"Unsupported currency: {v}. "
                f"Supported currencies: {', '.join(SUPPORTED_ACCOUNT_CURRENCIES)}"
            )
        return v.strip().upper()

    @model_serializer
    def _serialize(self) -> str:
        return self.code

    @classmethod
    def is_supported(cls, currency: str) -> bool:
        return currency.strip().upper() in SUPPORTED_ACCOUNT_CURRENCIES

    def __str__(self) -> str:
        return self.code


def available_pairs(pair_type: PairType | None = None) -> list[CurrencyPair]:
    """The instruments offered by the lot calculator, optionally filtered."""
    pairs = [CurrencyPair(code=c) for c in (*MAJOR_PAIRS, *CROSS_PAIRS, *METAL_PAIRS)]
    if pair_type is not None:
        pairs = [p for p in pairs if p.pair_type == pair_type]
    return pairs
