"""Lot calculator endpoints — position size, pip value, pair catalogue."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from forex_helper.api.presenters import PIP_VALUE_DP, present_calculation
from forex_helper.config import settings
from forex_helper.models.currency import AccountCurrency, CurrencyPair, PairType, available_pairs
from forex_helper.models.sizing import AccountBalance, RiskPercentage, StopDistance

router = APIRouter(prefix="/api/lot-calculator", tags=["lot-calculator"])


class CalculatePositionSizeRequest(BaseModel):
    account_balance: float
    account_currency: str = settings.default_account_currency
    risk_percentage: float
    stop_loss: float
    stop_loss_unit: Literal["pips", "points"] = "pips"
    currency_pair: str
    current_price: float | None = None  # required for USD/XXX pairs


@router.post("/calculate")
async def calculate_position_size(req: CalculatePositionSizeRequest):
    from forex_helper.api.main import app_state

    result = await app_state["position_size_engine"].size(
        account_balance=AccountBalance(amount=req.account_balance, currency=req.account_currency),
        risk_percentage=RiskPercentage(value=req.risk_percentage),
        stop_distance=StopDistance(value=req.stop_loss, unit=req.stop_loss_unit),
        pair=CurrencyPair.parse(req.currency_pair),
        account_currency=AccountCurrency(code=req.account_currency),
        current_price=req.current_price,
    )
    return present_calculation(result)


@router.get("/pip-value")
async def get_pip_value(
    pair: str,
    account_currency: str = settings.default_account_currency,
    current_price: float | None = None,
):
    from forex_helper.api.main import app_state

    currency_pair = CurrencyPair.parse(pair)
    pip_value = await app_state["pip_value_resolver"].resolve(
        currency_pair, AccountCurrency(code=account_currency), current_price
    )
    return {
        "pair": currency_pair.code,
        "account_currency": pip_value.currency,
        "pip_value": round(pip_value.value, PIP_VALUE_DP),
        "unit": "point" if currency_pair.is_metal() else "pip",
    }


@router.get("/currency-pairs")
async def list_currency_pairs(type: PairType | None = None):
    return [
        {
            "pair": p.code,
            "display_name": p.display_name,
            "base_currency": p.base,
            "quote_currency": p.quote,
            "type": p.pair_type.value,
        }
        for p in available_pairs(type)
    ]
