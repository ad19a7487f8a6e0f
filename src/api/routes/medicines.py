"""Medicine catalogue endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_actor_id, get_client_ip, get_inventory, get_ledger
from src.application.dto.requests import CreateMedicineRequest, UpdateMedicineRequest
from src.application.dto.responses import (
    ErrorResponse,
    MedicineListResponse,
    MedicineResponse,
    StockLevelResponse,
)
from src.core.entities.medicine import Medicine
from src.core.services import InventoryService, StockLedgerService

router = APIRouter(prefix="/api/medicines", tags=["medicines"])


@router.post(
    "",
    response_model=MedicineResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_medicine(
    request: CreateMedicineRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    service: InventoryService = Depends(get_inventory),
) -> MedicineResponse:
    """Add a medicine to the catalogue."""
    medicine = await service.create_medicine(
        Medicine(**request.model_dump()),
        actor_id=actor_id,
        source_ip=client_ip,
    )
    return MedicineResponse.from_entity(medicine)


@router.get("", response_model=MedicineListResponse)
async def list_medicines(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    search: str | None = Query(default=None, description="Match on name or generic name"),
    service: InventoryService = Depends(get_inventory),
) -> MedicineListResponse:
    """List active medicines by name."""
    medicines = await service.list_medicines(limit=limit + 1, offset=offset, search=search)
    page = medicines[:limit]
    return MedicineListResponse(
        medicines=[MedicineResponse.from_entity(m) for m in page],
        total=offset + len(page),
        limit=limit,
        offset=offset,
        has_more=len(medicines) > limit,
    )


@router.get(
    "/{medicine_id}",
    response_model=MedicineResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_medicine(
    medicine_id: str,
    service: InventoryService = Depends(get_inventory),
) -> MedicineResponse:
    """Get a medicine by ID."""
    return MedicineResponse.from_entity(await service.get_medicine(medicine_id))


@router.put(
    "/{medicine_id}",
    response_model=MedicineResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_medicine(
    medicine_id: str,
    request: UpdateMedicineRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    service: InventoryService = Depends(get_inventory),
) -> MedicineResponse:
    """Update the provided fields of a medicine."""
    medicine = await service.update_medicine(
        medicine_id,
        request.model_dump(exclude_unset=True, exclude_none=True),
        actor_id=actor_id,
        source_ip=client_ip,
    )
    return MedicineResponse.from_entity(medicine)


@router.get(
    "/{medicine_id}/stock",
    response_model=StockLevelResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_medicine_stock(
    medicine_id: str,
    service: InventoryService = Depends(get_inventory),
    ledger: StockLedgerService = Depends(get_ledger),
) -> StockLevelResponse:
    """Sellable stock and the unexpired batches holding it."""
    await service.get_medicine(medicine_id)
    stock = await ledger.available_stock(medicine_id)
    return StockLevelResponse.from_entity(stock)
