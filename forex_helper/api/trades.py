"""Trade endpoints — rule validation and settlement of a supplied trade."""

from fastapi import APIRouter, HTTPException, status
from loguru import logger
from pydantic import BaseModel

from forex_helper.api.presenters import present_trade
from forex_helper.config import settings
from forex_helper.models.currency import AccountCurrency, CurrencyPair
from forex_helper.models.sizing import LotSize
from forex_helper.models.timestamps import UtcDatetime
from forex_helper.models.trade import Price, Trade, TradeDirection
from forex_helper.trade_analyzer import TradeOutcomeAnalyzer

router = APIRouter(prefix="/api/trades", tags=["trades"])


class ValidateTradeRequest(BaseModel):
    direction: TradeDirection
    entry_price: float
    lot_size: float
    stop_loss: float | None = None
    take_profit: float | None = None
    risk_amount: float | None = None
    account_balance: float | None = None  # enables the risk checks


class OpenTradeRequest(BaseModel):
    user_id: str
    pair: str
    direction: TradeDirection
    entry_price: float
    lot_size: float
    risk_amount: float
    account_balance: float
    stop_loss: float | None = None
    take_profit: float | None = None
    entry_time: UtcDatetime | None = None
    notes: str | None = None


class CloseTradeRequest(BaseModel):
    user_id: str
    trade: Trade
    exit_price: float
    exit_time: UtcDatetime | None = None
    account_currency: str = settings.default_account_currency


@router.post("/validate")
async def validate_trade(req: ValidateTradeRequest):
    from forex_helper.api.main import app_state
    validator = app_state["trade_validator"]

    result = validator.validate_trade_creation(
        entry_price=Price(value=req.entry_price),
        stop_loss=Price(value=req.stop_loss) if req.stop_loss is not None else None,
        take_profit=Price(value=req.take_profit) if req.take_profit is not None else None,
        lot_size=LotSize(value=req.lot_size),
        direction=req.direction,
    )
    if req.risk_amount is not None and req.account_balance is not None:
        result = result.merge(validator.validate_risk_amount(req.risk_amount, req.account_balance))

    return {"is_valid": result.is_valid, "errors": result.errors}


@router.post("/close")
async def close_trade(req: CloseTradeRequest):
    from forex_helper.api.main import app_state

    trade = req.trade
    trade.ensure_owned_by(req.user_id)

    exit_price = Price(value=req.exit_price)
    check = app_state["trade_validator"].validate_trade_closing(trade, exit_price, req.exit_time)
    if not check.is_valid:
        logger.warning(f"Close of {trade.id} rejected: {check.errors}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=check.errors)

    analyzer = TradeOutcomeAnalyzer(
        app_state["pip_value_resolver"], AccountCurrency(code=req.account_currency)
    )
    await analyzer.settle(trade, exit_price, req.exit_time)
    return present_trade(trade)


@router.post("")
async def open_trade(req: OpenTradeRequest):
    from forex_helper.api.main import app_state

    trade = app_state["trade_validator"].open_trade(
        user_id=req.user_id,
        pair=CurrencyPair.parse(req.pair),
        direction=req.direction,
        entry_price=Price(value=req.entry_price),
        lot_size=LotSize(value=req.lot_size),
        risk_amount=req.risk_amount,
        account_balance=req.account_balance,
        stop_loss=Price(value=req.stop_loss) if req.stop_loss is not None else None,
        take_profit=Price(value=req.take_profit) if req.take_profit is not None else None,
        entry_time=req.entry_time,
        notes=req.notes,
    )
    return {**present_trade(trade), "trade": trade.model_dump(mode="json")}
