"""Performance metrics and report endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from forex_helper.api.presenters import present_metrics, present_report
from forex_helper.models.timestamps import UtcDatetime
from forex_helper.models.trade import Trade

router = APIRouter(prefix="/api/reports", tags=["reports"])


class MetricsRequest(BaseModel):
    trades: list[Trade]
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None


class GenerateReportRequest(BaseModel):
    user_id: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    trades: list[Trade] = []


@router.post("/metrics")
async def get_performance_metrics(req: MetricsRequest):
    from forex_helper.api.main import app_state

    trades = [
        t for t in req.trades
        if (req.start_date is None or t.entry_time >= req.start_date)
        and (req.end_date is None or t.entry_time <= req.end_date)
    ]
    metrics = app_state["metrics_aggregator"].calculate(trades)
    return present_metrics(metrics)


@router.post("/generate")
async def generate_report(req: GenerateReportRequest):
    from forex_helper.api.main import app_state

    report = app_state["report_generator"].generate(
        user_id=req.user_id,
        start_date=req.start_date,
        end_date=req.end_date,
        trades=req.trades,
    )
    return present_report(report)
