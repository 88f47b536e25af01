"""Medicine catalog and stock transfer endpoints."""

from typing import TypeVar

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pharmastock.api.dependencies import (
    get_actor,
    get_create_medicine_use_case,
    get_delete_medicine_use_case,
    get_get_medicine_use_case,
    get_list_medicines_use_case,
    get_transfer_stock_use_case,
    get_update_medicine_use_case,
)
from pharmastock.application.dto.requests import (
    CreateMedicineRequest,
    ListMedicinesRequest,
    TransferStockRequest,
    UpdateMedicineRequest,
)
from pharmastock.application.dto.responses import (
    DeleteMedicineResponse,
    ErrorResponse,
    MedicineListResponse,
    MedicineResponse,
    TransferStockResponse,
)
from pharmastock.application.use_cases import (
    CreateMedicineUseCase,
    DeleteMedicineUseCase,
    GetMedicineUseCase,
    ListMedicinesUseCase,
    TransferStockUseCase,
    UpdateMedicineUseCase,
)
from pharmastock.core.entities.audit import Actor
from pharmastock.core.entities.medicine import MedicineStatus
from pharmastock.core.exceptions import ValidationError
from pharmastock.core.interfaces.image_store import ImageUpload
from pharmastock.core.services.expiry import ExpiryWindow

router = APIRouter(prefix="/api/medicines", tags=["medicines"])

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], raw: str) -> ModelT:
    """Validate the JSON ``payload`` form field against a request model."""
    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "payload"
        raise ValidationError(field, first["msg"], first.get("input")) from e


async def read_image(upload: UploadFile | None) -> ImageUpload | None:
    """Buffer an uploaded file; a missing or unnamed part means no image."""
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return ImageUpload(data=data, filename=upload.filename, content_type=upload.content_type)


@router.post(
    "",
    response_model=MedicineResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def create_medicine(
    payload: str = Form(..., description="CreateMedicineRequest as JSON"),
    image: UploadFile | None = File(default=None),
    actor: Actor = Depends(get_actor),
    use_case: CreateMedicineUseCase = Depends(get_create_medicine_use_case),
) -> MedicineResponse:
    """Add a medicine batch with its image."""
    request = parse_payload(CreateMedicineRequest, payload)
    medicine = await use_case.execute(request, await read_image(image), actor)
    return use_case.to_response(medicine)


@router.get("", response_model=MedicineListResponse, responses={400: {"model": ErrorResponse}})
async def list_medicines(
    search: str | None = Query(default=None),
    status_filter: MedicineStatus | None = Query(default=None, alias="status"),
    expiry: ExpiryWindow | None = Query(default=None),
    sort_by: str = Query(default="expiry_date"),
    order: str = Query(default="desc"),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    use_case: ListMedicinesUseCase = Depends(get_list_medicines_use_case),
) -> MedicineListResponse:
    """Search, filter, sort and page the live catalog."""
    result = await use_case.execute(
        ListMedicinesRequest(
            search=search,
            status=status_filter,
            expiry=expiry,
            sort_by=sort_by,
            order=order,
            page=page,
            limit=limit,
        )
    )
    return use_case.to_response(result)


@router.get(
    "/{medicine_id}",
    response_model=MedicineResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_medicine(
    medicine_id: int,
    use_case: GetMedicineUseCase = Depends(get_get_medicine_use_case),
) -> MedicineResponse:
    medicine = await use_case.execute(medicine_id)
    return use_case.to_response(medicine)


@router.patch(
    "/{medicine_id}",
    response_model=MedicineResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def update_medicine(
    medicine_id: int,
    payload: str | None = Form(default=None, description="UpdateMedicineRequest as JSON"),
    image: UploadFile | None = File(default=None),
    actor: Actor = Depends(get_actor),
    use_case: UpdateMedicineUseCase = Depends(get_update_medicine_use_case),
) -> MedicineResponse:
    """Apply a partial update; omitted fields are left unchanged."""
    patch = parse_payload(UpdateMedicineRequest, payload) if payload else UpdateMedicineRequest()
    medicine = await use_case.execute(medicine_id, patch, await read_image(image), actor)
    return use_case.to_response(medicine)


@router.delete(
    "/{medicine_id}",
    response_model=DeleteMedicineResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_medicine(
    medicine_id: int,
    actor: Actor = Depends(get_actor),
    use_case: DeleteMedicineUseCase = Depends(get_delete_medicine_use_case),
) -> DeleteMedicineResponse:
    """Soft-delete a medicine."""
    medicine = await use_case.execute(medicine_id, actor)
    return use_case.to_response(medicine)


@router.post(
    "/{medicine_id}/transfer",
    response_model=TransferStockResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def transfer_stock(
    medicine_id: int,
    request: TransferStockRequest,
    actor: Actor = Depends(get_actor),
    use_case: TransferStockUseCase = Depends(get_transfer_stock_use_case),
) -> TransferStockResponse:
    """Move units from the store to the dispenser."""
    result = await use_case.execute(medicine_id, request.quantity, actor)
    return use_case.to_response(result)
