"""
List Medicines Use Case.

Filtered, sorted, paginated catalog.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pharmastock.application.dto.requests import ListMedicinesRequest
from pharmastock.application.dto.responses import MedicineListResponse, MedicineResponse
from pharmastock.config import get_logger, get_settings
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.exceptions import ValidationError
from pharmastock.core.interfaces.medicine_store import (
    SORTABLE_FIELDS,
    IMedicineStore,
    MedicineQuery,
)
from pharmastock.core.services.expiry import expiry_window_bounds

logger = get_logger(__name__)


@dataclass
class MedicinePage:
    """One page of catalog results."""

    items: list[Medicine]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.total else 0


def resolve_page(page: int, limit: int | None) -> tuple[int, int]:
    """Validate page and limit against inventory settings."""
    settings = get_settings().inventory
    if page < 1:
        raise ValidationError("page", "Page must be 1 or greater", page)
    per_page = settings.default_page_size if limit is None else limit
    if not 1 <= per_page <= settings.max_page_size:
        raise ValidationError(
            "limit", f"Limit must be between 1 and {settings.max_page_size}", limit
        )
    return page, per_page


class ListMedicinesUseCase:
    """Search the live catalog."""

    def __init__(
        self,
        medicine_store: IMedicineStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicine_store = medicine_store
        self._clock = clock or utcnow

    async def _get_medicine_store(self) -> IMedicineStore:
        if self._medicine_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_medicine_store

            self._medicine_store = await get_medicine_store()
        return self._medicine_store

    async def execute(self, request: ListMedicinesRequest) -> MedicinePage:
        page, per_page = resolve_page(request.page, request.limit)

        if request.sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                "sort_by",
                f"Must be one of {', '.join(sorted(SORTABLE_FIELDS))}",
                request.sort_by,
            )
        order = request.order.lower()
        if order not in ("asc", "desc"):
            raise ValidationError("order", "Must be asc or desc", request.order)

        now = self._clock()
        store = await self._get_medicine_store()

        # Statuses are only recomputed on writes; catch up lapsed batches first
        await store.mark_expired(now)

        expiry_from = expiry_to = None
        if request.expiry is not None:
            expiry_from, expiry_to = expiry_window_bounds(request.expiry, now)

        query = MedicineQuery(
            search=request.search,
            status=request.status,
            expiry_from=expiry_from,
            expiry_to=expiry_to,
            sort_by=request.sort_by,
            descending=order == "desc",
            limit=per_page,
            offset=(page - 1) * per_page,
        )
        items, total = await store.search(query)

        logger.debug(
            "medicines_listed",
            total=total,
            page=page,
            per_page=per_page,
            search=request.search,
            status=request.status.value if request.status else None,
        )
        return MedicinePage(items=items, total=total, page=page, per_page=per_page)

    def to_response(self, result: MedicinePage) -> MedicineListResponse:
        return MedicineListResponse(
            items=[MedicineResponse.from_entity(m) for m in result.items],
            total=result.total,
            page=result.page,
            per_page=result.per_page,
            total_pages=result.total_pages,
        )
