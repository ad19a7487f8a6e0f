"""Create Sale Use Case: prices a sale, allocates stock and issues an invoice."""

from dataclasses import dataclass

from src.application.dto.requests import CreateSaleRequest
from src.application.dto.responses import SaleResponse
from src.config import get_logger
from src.core.entities.sale import Sale, SaleLineInput
from src.core.services.billing_engine import BillingEngine

logger = get_logger(__name__)


@dataclass
class CreateSaleResult:
    """Result of creating a sale."""

    sale: Sale


class CreateSaleUseCase:
    """Create a sale against explicit batches with compliance checks."""

    def __init__(self, billing_engine: BillingEngine | None = None):
        self._engine = billing_engine

    async def _get_engine(self) -> BillingEngine:
        if self._engine is None:
            from src.application.services import get_billing_engine

            self._engine = await get_billing_engine()
        return self._engine

    async def execute(
        self,
        request: CreateSaleRequest,
        actor_id: str,
        source_ip: str | None = None,
    ) -> CreateSaleResult:
        """Execute create sale use case."""
        logger.info(
            "create_sale_started",
            items=len(request.items),
            prescription_id=request.prescription_id,
            actor_id=actor_id,
        )

        engine = await self._get_engine()
        sale = await engine.create_sale(
            items=[
                SaleLineInput(
                    medicine_id=item.medicine_id,
                    batch_id=item.batch_id,
                    quantity=item.quantity,
                )
                for item in request.items
            ],
            actor_id=actor_id,
            discount_percent=request.discount,
            payment_method=request.payment_method,
            prescription_id=request.prescription_id,
            customer_name=request.customer_name,
            source_ip=source_ip,
        )

        logger.info(
            "create_sale_complete",
            sale_id=sale.id,
            invoice_number=sale.invoice_number,
            total=str(sale.total_amount),
        )

        return CreateSaleResult(sale=sale)

    def to_response(self, result: CreateSaleResult) -> SaleResponse:
        """Convert result to API response."""
        return SaleResponse.from_entity(result.sale)
