"""Sales reports fetched from the API."""

from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import CateringApiClient
from catering_orders.adapters.payloads import parse_report
from catering_orders.domain.errors import InvalidInputError
from catering_orders.domain.reports import REPORT_RANGES, Report
from catering_orders.domain.sessions import Session


@dataclass
class ReportService:
    """Fetches daily, monthly or yearly report rows."""

    client: CateringApiClient

    async def fetch(self, session: Session, range_name: str = "daily") -> Report:
        """Return the report for a range."""
        if range_name not in REPORT_RANGES:
            raise InvalidInputError(
                f"Unknown report range '{range_name}', "
                f"expected one of {', '.join(REPORT_RANGES)}"
            )
        payload = await self.client.get_report(session.token, range_name)
        return parse_report(range_name, payload)
