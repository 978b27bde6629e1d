"""Tests for sales reports."""

import asyncio

import pytest

from catering_orders.domain.errors import InvalidInputError
from catering_orders.services.reports import ReportService
from tests.conftest import ADMIN, FakeCateringApiClient


def test_fetch_report_for_range() -> None:
    client = FakeCateringApiClient(
        reports={
            "yearly": {
                "rows": [{"period": "2024", "orders_count": 12, "revenue": 1000}],
                "totals": {"orders_count": 12, "revenue": 1000},
            }
        }
    )

    report = asyncio.run(ReportService(client).fetch(ADMIN, "yearly"))

    assert ("get_report", "yearly") in client.calls
    assert report.rows[0].orders_count == 12
    assert report.rows[0].profit == 0
    assert report.totals.revenue == 1000


def test_default_range_is_daily() -> None:
    client = FakeCateringApiClient()

    report = asyncio.run(ReportService(client).fetch(ADMIN))

    assert report.range == "daily"
    assert report.rows == []


def test_unknown_range_is_rejected() -> None:
    client = FakeCateringApiClient()

    with pytest.raises(InvalidInputError):
        asyncio.run(ReportService(client).fetch(ADMIN, "weekly"))

    assert client.calls == []
