"""Domain models for sales reports."""

from dataclasses import dataclass

REPORT_RANGES = ("daily", "monthly", "yearly")


@dataclass(frozen=True)
class ReportRow:
    """Totals for one reporting period."""

    period: str
    orders_count: int
    revenue: float
    cost: float
    profit: float


@dataclass(frozen=True)
class Report:
    """Report rows with grand totals."""

    range: str
    rows: list[ReportRow]
    totals: ReportRow
