"""Report Assembler — metrics for a user's trades inside a date range."""

from datetime import datetime

from loguru import logger

from forex_helper.errors import InvalidRangeError
from forex_helper.metrics import MetricsAggregator
from forex_helper.models.report import TradingReport
from forex_helper.models.timestamps import as_utc, utcnow
from forex_helper.models.trade import Trade


def filter_by_entry_time(trades: list[Trade], start: datetime, end: datetime) -> list[Trade]:
    """Trades entered within [start, end], both ends inclusive. Naive bounds are UTC."""
    start, end = as_utc(start), as_utc(end)
    return [t for t in trades if start <= t.entry_time <= end]


def report_id(user_id: str, start: datetime, end: datetime, generated_at: datetime) -> str:
    millis = int(as_utc(generated_at).timestamp() * 1000)
    return f"report_{user_id}_{start:%Y-%m-%d}_{end:%Y-%m-%d}_{millis}"


class ReportGenerator:
    def __init__(self, metrics_aggregator: MetricsAggregator):
        self.metrics_aggregator = metrics_aggregator

    def generate(
        self,
        user_id: str,
        start_date: datetime,
        end_date: datetime,
        trades: list[Trade],
        now: datetime | None = None,
    ) -> TradingReport:
        """Build a report over the trades entered in the range.

        Raises InvalidRangeError when ``end_date`` precedes ``start_date``,
        before looking at the trades at all.
        """
        start_date, end_date = as_utc(start_date), as_utc(end_date)
        if end_date < start_date:
            raise InvalidRangeError(
                f"End date {end_date.isoformat()} is before start date {start_date.isoformat()}"
            )

        in_range = filter_by_entry_time(trades, start_date, end_date)
        metrics = self.metrics_aggregator.calculate(in_range)

        generated_at = as_utc(now) if now is not None else utcnow()
        report = TradingReport(
            id=report_id(user_id, start_date, end_date, generated_at),
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            metrics=metrics,
            # Snapshot, so later note edits on the live trades don't leak in
            trades=tuple(t.model_copy(deep=True) for t in in_range),
            created_at=generated_at,
        )
        logger.info(
            f"Generated {report.id}: {len(in_range)}/{len(trades)} trades in range, "
            f"win rate {metrics.win_rate}"
        )
        return report
