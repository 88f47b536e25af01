"""
Create Medicine Use Case.

Add a batch to the catalog with its image.
"""

from collections.abc import Callable
from datetime import datetime

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.dto.requests import CreateMedicineRequest
from pharmastock.application.dto.responses import MedicineResponse
from pharmastock.config import get_logger, get_settings
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.medicine import Medicine, PrescriptionStatus, utcnow
from pharmastock.core.exceptions import (
    DuplicateBatchError,
    ImageRequiredError,
    ImageUploadFailedError,
    InvalidPrescriptionStatusError,
    PharmaStockError,
)
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.image_store import IImageStore, ImageUpload
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.services.stock_status import status_for

logger = get_logger(__name__)


async def upload_image(image_store: IImageStore, image: ImageUpload) -> str:
    """Upload through the image store, normalising foreign failures."""
    try:
        return await image_store.upload(image)
    except PharmaStockError:
        raise
    except Exception as e:
        raise ImageUploadFailedError(image.filename, str(e)) from e


async def discard_image(image_store: IImageStore, url: str) -> None:
    """Remove an uploaded image whose medicine write did not go through."""
    try:
        removed = await image_store.delete(url)
    except Exception as e:
        logger.warning("orphan_image_cleanup_failed", url=url, error=str(e))
        return
    logger.info("orphan_image_cleanup", url=url, removed=removed)


class CreateMedicineUseCase:
    """Validate, upload the image, persist, audit."""

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        image_store: IImageStore | None = None,
        audit_sink: IAuditSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._image_store = image_store
        self._audit = AuditRecorder(audit_sink)
        self._clock = clock or utcnow

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    def _get_image_store(self) -> IImageStore:
        if self._image_store is None:
            from pharmastock.infrastructure.images import get_image_store

            self._image_store = get_image_store()
        return self._image_store

    async def execute(
        self,
        request: CreateMedicineRequest,
        image: ImageUpload | None,
        actor: Actor,
    ) -> Medicine:
        """Execute create medicine use case."""
        logger.info(
            "create_medicine_started",
            brand_name=request.brand_name,
            batch_number=request.batch_number,
            actor_id=actor.id,
        )

        try:
            prescription_status = PrescriptionStatus(request.prescription_status)
        except ValueError as e:
            raise InvalidPrescriptionStatusError(request.prescription_status) from e

        if image is None:
            raise ImageRequiredError()

        store = await self._get_medicine_store()

        existing = await store.find_by_identity(
            request.brand_name, request.strength, request.batch_number
        )
        if existing is not None:
            raise DuplicateBatchError(
                request.brand_name,
                request.strength,
                request.batch_number,
                existing_id=existing.id,  # type: ignore[arg-type]
            )

        now = self._clock()
        threshold = request.reorder_threshold
        if threshold is None:
            threshold = get_settings().inventory.default_reorder_threshold

        medicine = Medicine(
            brand_name=request.brand_name,
            generic_name=request.generic_name,
            dosage_form=request.dosage_form,
            strength=request.strength,
            unit_type=request.unit_type,
            batch_number=request.batch_number,
            store_quantity=request.store_quantity,
            dispenser_quantity=0,
            sub_unit_quantity=request.sub_unit_quantity,
            purchase_cost=request.purchase_cost,
            selling_price=request.selling_price,
            reorder_threshold=threshold,
            reorder_quantity=request.reorder_quantity,
            expiry_date=request.expiry_date,
            received_date=request.received_date,
            prescription_status=prescription_status,
            storage_location=request.storage_location,
            storage_conditions=request.storage_conditions,
            supplier_info=request.supplier_info,
            notes=request.notes,
        )
        medicine.status = status_for(medicine, now)

        # Nothing is persisted unless the image lands first
        image_store = self._get_image_store()
        medicine.image_url = await upload_image(image_store, image)

        try:
            medicine = await store.create(medicine)
        except PharmaStockError:
            await discard_image(image_store, medicine.image_url)
            raise

        await self._audit.record(
            actor,
            AuditAction.ADD,
            f"Added {medicine.brand_name} {medicine.strength} batch {medicine.batch_number} "
            f"(id {medicine.id}, store quantity {medicine.store_quantity})",
        )

        logger.info(
            "create_medicine_complete",
            medicine_id=medicine.id,
            status=medicine.status.value,
        )
        return medicine

    def to_response(self, medicine: Medicine) -> MedicineResponse:
        """Convert result to API response."""
        return MedicineResponse.from_entity(medicine)
