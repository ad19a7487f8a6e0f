"""Sales endpoints: billing, dispensing checks and reports."""

from datetime import date, datetime, time

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_billing,
    get_client_ip,
    get_create_sale_use_case,
    get_sales_report_use_case,
    get_validate_dispensing_use_case,
)
from src.application.dto.requests import CreateSaleRequest, ValidateDispensingRequest
from src.application.dto.responses import (
    ComplianceResultResponse,
    ErrorResponse,
    SaleListResponse,
    SaleResponse,
    SalesReportResponse,
)
from src.application.use_cases import (
    CreateSaleUseCase,
    GenerateSalesReportUseCase,
    ValidateDispensingUseCase,
)
from src.core.services import BillingEngine

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_sale(
    request: CreateSaleRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    use_case: CreateSaleUseCase = Depends(get_create_sale_use_case),
) -> SaleResponse:
    """Create a sale, decrement the chosen batches and issue an invoice number."""
    result = await use_case.execute(request, actor_id=actor_id, source_ip=client_ip)
    return use_case.to_response(result)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    engine: BillingEngine = Depends(get_billing),
) -> SaleListResponse:
    """List sales, newest first."""
    sales = await engine.list_sales(
        limit=limit + 1,
        offset=offset,
        start=datetime.combine(start_date, time.min) if start_date else None,
        end=datetime.combine(end_date, time.max) if end_date else None,
    )
    page = sales[:limit]
    return SaleListResponse(
        sales=[SaleResponse.from_entity(s) for s in page],
        total=offset + len(page),
        limit=limit,
        offset=offset,
        has_more=len(sales) > limit,
    )


@router.get(
    "/reports/summary",
    response_model=SalesReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def sales_report(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    use_case: GenerateSalesReportUseCase = Depends(get_sales_report_use_case),
) -> SalesReportResponse:
    """Totals for an inclusive date range."""
    result = await use_case.execute(start_date, end_date)
    return use_case.to_response(result)


@router.post(
    "/validate-dispensing",
    response_model=ComplianceResultResponse,
    responses={404: {"model": ErrorResponse}},
)
async def validate_dispensing(
    request: ValidateDispensingRequest,
    use_case: ValidateDispensingUseCase = Depends(get_validate_dispensing_use_case),
) -> ComplianceResultResponse:
    """Check schedule rules for one medicine without touching stock."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: str,
    engine: BillingEngine = Depends(get_billing),
) -> SaleResponse:
    """Get a sale with its items."""
    sale = await engine.get_sale(sale_id)
    return SaleResponse.from_entity(sale)
