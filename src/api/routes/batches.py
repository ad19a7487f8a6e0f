"""Batch receiving and stock correction endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_actor_id, get_client_ip, get_inventory
from src.application.dto.requests import CreateBatchRequest, UpdateBatchQuantityRequest
from src.application.dto.responses import BatchResponse, ErrorResponse
from src.core.entities.medicine import Batch
from src.core.services import InventoryService

router = APIRouter(prefix="/api/batches", tags=["batches"])


@router.post(
    "",
    response_model=BatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_batch(
    request: CreateBatchRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    service: InventoryService = Depends(get_inventory),
) -> BatchResponse:
    """Receive a new batch of a medicine."""
    batch = await service.create_batch(
        Batch(**request.model_dump()),
        actor_id=actor_id,
        source_ip=client_ip,
    )
    return BatchResponse.from_entity(batch)


@router.patch(
    "/{batch_id}/quantity",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_batch_quantity(
    batch_id: str,
    request: UpdateBatchQuantityRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    service: InventoryService = Depends(get_inventory),
) -> BatchResponse:
    """Overwrite a batch's quantity after a physical count."""
    batch = await service.update_batch_quantity(
        batch_id,
        request.quantity,
        actor_id=actor_id,
        source_ip=client_ip,
    )
    return BatchResponse.from_entity(batch)
