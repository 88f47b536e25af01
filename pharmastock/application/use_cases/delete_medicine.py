"""
Delete Medicine Use Case.

Soft delete.
"""

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.concurrency import run_with_version_retry
from pharmastock.application.dto.responses import DeleteMedicineResponse
from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction
from pharmastock.core.entities.medicine import Medicine
from pharmastock.core.exceptions import MedicineNotFoundError
from pharmastock.core.interfaces.audit_sink import IAuditSink
from pharmastock.core.interfaces.medicine_store import IMedicineStore

logger = get_logger(__name__)


class DeleteMedicineUseCase:
    """Flag a medicine as deleted. Its sale records are kept."""

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        audit_sink: IAuditSink | None = None,
    ):
        self._medicine_store = medicine_store
        self._audit = AuditRecorder(audit_sink)

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def execute(self, medicine_id: int, actor: Actor) -> Medicine:
        store = await self._get_medicine_store()

        async def _attempt() -> Medicine:
            current = await store.get(medicine_id)
            if current is None:
                raise MedicineNotFoundError(medicine_id)
            deleted = current.model_copy(update={"is_deleted": True})
            return await store.update(deleted, expected_version=current.version)

        deleted = await run_with_version_retry(_attempt)

        await self._audit.record(
            actor,
            AuditAction.DELETE,
            f"Deleted {deleted.brand_name} {deleted.strength} batch {deleted.batch_number} "
            f"(id {deleted.id})",
        )
        logger.info("medicine_deleted", medicine_id=medicine_id, actor_id=actor.id)
        return deleted

    def to_response(self, medicine: Medicine) -> DeleteMedicineResponse:
        return DeleteMedicineResponse(id=medicine.id, deleted=True)  # type: ignore[arg-type]
