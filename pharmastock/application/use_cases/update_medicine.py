"""
Update Medicine Use Case.

Partial edit with optional image replacement.
"""

from collections.abc import Callable
from datetime import datetime

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.concurrency import run_with_version_retry
from pharmastock.application.dto.responses import MedicineResponse
from pharmastock.application.use_cases.create_medicine import discard_image, upload_image
from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.medicine import Medicine, MedicinePatch, utcnow
from pharmastock.core.exceptions import (
    DuplicateBatchError,
    MedicineNotFoundError,
    PharmaStockError,
)
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.image_store import IImageStore, ImageUpload
from pharmastock.core.interfaces.medicine_store import IMedicineStore
from pharmastock.core.services.stock_status import status_for

logger = get_logger(__name__)


class UpdateMedicineUseCase:
    """
    Merge a patch into a live medicine.

    Fields absent from the patch keep their stored values. The merged
    medicine is fully revalidated and its status recomputed before the
    conditional write.
    """

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

    async def _merge(
        self, store: IMedicineStore, medicine_id: int, patch: MedicinePatch
    ) -> tuple[Medicine, Medicine]:
        """Read, check identity, merge. Returns (current, merged)."""
        current = await store.get(medicine_id)
        if current is None:
            raise MedicineNotFoundError(medicine_id)

        merged = patch.apply_to(current)

        if patch.touches_identity(current):
            clash = await store.find_by_identity(
                merged.brand_name,
                merged.strength,
                merged.batch_number,
                exclude_id=medicine_id,
            )
            if clash is not None:
                raise DuplicateBatchError(
                    merged.brand_name,
                    merged.strength,
                    merged.batch_number,
                    existing_id=clash.id,  # type: ignore[arg-type]
                )
        return current, merged

    async def execute(
        self,
        medicine_id: int,
        patch: MedicinePatch,
        image: ImageUpload | None,
        actor: Actor,
    ) -> Medicine:
        """Execute update medicine use case."""
        changed = sorted(patch.changes())
        logger.info(
            "update_medicine_started",
            medicine_id=medicine_id,
            fields=changed,
            new_image=image is not None,
            actor_id=actor.id,
        )

        store = await self._get_medicine_store()

        # Validate everything before touching the image store
        await self._merge(store, medicine_id, patch)

        image_url = None
        if image is not None:
            image_url = await upload_image(self._get_image_store(), image)

        async def _attempt() -> Medicine:
            current, merged = await self._merge(store, medicine_id, patch)
            if image_url is not None:
                merged.image_url = image_url
            merged.status = status_for(merged, self._clock())
            return await store.update(merged, expected_version=current.version)

        try:
            updated = await run_with_version_retry(_attempt)
        except PharmaStockError:
            if image_url is not None:
                await discard_image(self._get_image_store(), image_url)
            raise

        if image_url is not None:
            changed.append("image_url")
        await self._audit.record(
            actor,
            AuditAction.EDIT,
            f"Edited {updated.brand_name} {updated.strength} batch {updated.batch_number} "
            f"(id {updated.id}): {', '.join(changed) or 'no fields'}",
        )

        logger.info(
            "update_medicine_complete",
            medicine_id=updated.id,
            status=updated.status.value,
            version=updated.version,
        )
        return updated

    def to_response(self, medicine: Medicine) -> MedicineResponse:
        return MedicineResponse.from_entity(medicine)
