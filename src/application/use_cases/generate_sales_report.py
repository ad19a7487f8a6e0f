"""Generate Sales Report Use Case: totals over an inclusive date range."""

from dataclasses import dataclass
from datetime import date

from src.application.dto.responses import SalesReportResponse
from src.config import get_logger
from src.core.entities.sale import SalesReport
from src.core.exceptions import ValidationError
from src.core.services.billing_engine import BillingEngine

logger = get_logger(__name__)


@dataclass
class SalesReportResult:
    start: date
    end: date
    report: SalesReport


class GenerateSalesReportUseCase:
    """Aggregate sales count, revenue, GST and units sold for a period."""

    def __init__(self, billing_engine: BillingEngine | None = None):
        self._engine = billing_engine

    async def _get_engine(self) -> BillingEngine:
        if self._engine is None:
            from src.application.services import get_billing_engine

            self._engine = await get_billing_engine()
        return self._engine

    async def execute(self, start: date | None, end: date | None) -> SalesReportResult:
        """
        Build the report.

        Raises:
            ValidationError: A bound is missing or start is after end
        """
        if start is None or end is None:
            raise ValidationError(
                "startDate" if start is None else "endDate",
                "Start date and end date are required",
            )

        engine = await self._get_engine()
        report = await engine.sales_report(start, end)

        logger.info(
            "sales_report_generated",
            start=start.isoformat(),
            end=end.isoformat(),
            total_sales=report.total_sales,
        )
        return SalesReportResult(start=start, end=end, report=report)

    def to_response(self, result: SalesReportResult) -> SalesReportResponse:
        return SalesReportResponse.from_entity(result.report, result.start, result.end)
