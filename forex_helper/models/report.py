from pydantic import BaseModel, ConfigDict, Field, model_validator

from forex_helper.models.metrics import PerformanceMetrics
from forex_helper.models.timestamps import UtcDatetime, utcnow
from forex_helper.models.trade import Trade


class TradingReport(BaseModel):
    """Metrics snapshot for one user over a date range. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    metrics: PerformanceMetrics
    trades: tuple[Trade, ...] = ()
    created_at: UtcDatetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _range(self) -> "TradingReport":
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self

    @property
    def trade_count(self) -> int:
        return len(self.trades)
