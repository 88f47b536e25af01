"""
Domain exceptions for the PharmaStock application.

Every error carries a machine-readable code and a details mapping so the API
layer can tell the taxonomy kinds apart without string matching.
"""

from typing import Any


class PharmaStockError(Exception):
    """Base exception for all PharmaStock errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(PharmaStockError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Quantity is not a positive integer."""

    def __init__(self, quantity: Any):
        super().__init__(
            field="quantity",
            message="Quantity must be a positive integer",
            value=quantity,
        )
        self.code = "INVALID_QUANTITY"


class InvalidPrescriptionStatusError(ValidationError):
    """Prescription status outside Prescription, OTC and Controlled."""

    def __init__(self, value: Any):
        super().__init__(
            field="prescription_status",
            message="Must be one of Prescription, OTC, Controlled",
            value=value,
        )
        self.code = "INVALID_PRESCRIPTION_STATUS"


class ImageRequiredError(ValidationError):
    """A medicine cannot be created without its image."""

    def __init__(self) -> None:
        super().__init__(field="image", message="Image file is required")
        self.code = "IMAGE_REQUIRED"


class InvalidImageError(ValidationError):
    """Uploaded image is empty, too large, or of a disallowed type."""

    def __init__(self, filename: str, reason: str):
        super().__init__(field="image", message=f"'{filename}': {reason}")
        self.code = "INVALID_IMAGE"
        self.details["filename"] = filename


# Not Found Exceptions
class NotFoundError(PharmaStockError):
    """Referenced record is absent or soft-deleted."""

    pass


class MedicineNotFoundError(NotFoundError):
    """Medicine missing or soft-deleted."""

    def __init__(self, medicine_id: int):
        super().__init__(
            f"Medicine not found: {medicine_id}",
            code="MEDICINE_NOT_FOUND",
            details={"medicine_id": medicine_id},
        )


class SaleNotFoundError(NotFoundError):
    """Sale record not found."""

    def __init__(self, sale_id: int):
        super().__init__(
            f"Sale record not found: {sale_id}",
            code="SALE_NOT_FOUND",
            details={"sale_id": sale_id},
        )


# Conflict Exceptions
class ConflictError(PharmaStockError):
    """Write conflicts with existing state."""

    pass


class DuplicateBatchError(ConflictError):
    """Another live medicine already has this brand/strength/batch identity."""

    def __init__(self, brand_name: str, strength: str, batch_number: str, existing_id: int):
        super().__init__(
            f"Medicine {brand_name} {strength} batch {batch_number} already exists",
            code="DUPLICATE_BATCH",
            details={
                "brand_name": brand_name,
                "strength": strength,
                "batch_number": batch_number,
                "existing_id": existing_id,
            },
        )


class ConcurrentUpdateError(ConflictError):
    """Medicine changed between read and conditional write."""

    def __init__(self, medicine_id: int, attempts: int | None = None):
        super().__init__(
            f"Medicine {medicine_id} was modified concurrently",
            code="CONCURRENT_UPDATE",
            details={"medicine_id": medicine_id, "attempts": attempts},
        )


# Stock Exceptions
class InsufficientStockError(PharmaStockError):
    """Requested quantity exceeds what the pool holds."""

    def __init__(
        self,
        medicine_id: int,
        requested: int,
        available: int,
        pool: str,
        code: str = "INSUFFICIENT_STOCK",
    ):
        super().__init__(
            f"Not enough stock in {pool} for medicine {medicine_id}: "
            f"requested {requested}, available {available}",
            code=code,
            details={
                "medicine_id": medicine_id,
                "requested": requested,
                "available": available,
                "pool": pool,
            },
        )


class InsufficientStoreStockError(InsufficientStockError):
    """Transfer exceeds the store quantity."""

    def __init__(self, medicine_id: int, requested: int, available: int):
        super().__init__(
            medicine_id,
            requested,
            available,
            pool="store",
            code="INSUFFICIENT_STORE_STOCK",
        )


class InsufficientDispenserStockError(InsufficientStockError):
    """Sale exceeds the dispenser quantity."""

    def __init__(self, medicine_id: int, requested: int, available: int):
        super().__init__(
            medicine_id,
            requested,
            available,
            pool="dispenser",
            code="INSUFFICIENT_DISPENSER_STOCK",
        )


# Upstream Exceptions
class UpstreamError(PharmaStockError):
    """An external collaborator failed."""

    pass


class ImageUploadFailedError(UpstreamError):
    """Image store could not persist the upload."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            f"Failed to upload image '{filename}': {reason}",
            code="IMAGE_UPLOAD_FAILED",
            details={"filename": filename, "reason": reason},
        )


# Storage Exceptions
class StorageError(PharmaStockError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(PharmaStockError):
    """Configuration error."""

    pass
