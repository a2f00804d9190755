"""
Domain exceptions for the billing application.

Every failure surfaces at the builder, renderer or export boundary with a
specific type so callers can choose between retry, abort and fallback.
"""

from typing import Any


class BillingError(Exception):
    """Base exception for all billing errors."""

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
class ValidationError(BillingError):
    """Input rejected before it reaches the calculator."""

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


# Draft State Exceptions
class StateError(BillingError):
    """Operation is not valid for the current draft state."""

    pass


class NoDraftError(StateError):
    """No draft bill is open."""

    def __init__(self, operation: str):
        super().__init__(
            f"No draft bill is open for '{operation}'",
            code="NO_DRAFT",
            details={"operation": operation},
        )


class DraftInProgressError(StateError):
    """A draft with unsaved items already exists."""

    def __init__(self, bill_number: str, item_count: int):
        super().__init__(
            f"Draft {bill_number} has {item_count} unsaved item(s)",
            code="DRAFT_IN_PROGRESS",
            details={"bill_number": bill_number, "item_count": item_count},
        )


class ItemIndexError(StateError):
    """Item index is outside the draft's item list."""

    def __init__(self, index: int, size: int):
        super().__init__(
            f"Item index {index} out of range for {size} item(s)",
            code="ITEM_INDEX_OUT_OF_RANGE",
            details={"index": index, "size": size},
        )


class FinalizeInProgressError(StateError):
    """Another finalize call for the same draft has not completed."""

    def __init__(self, bill_number: str):
        super().__init__(
            f"Finalize already in progress for {bill_number}",
            code="FINALIZE_IN_PROGRESS",
            details={"bill_number": bill_number},
        )


# Persistence Exceptions
class PersistenceError(BillingError):
    """Data service reported a failure; message is passed through verbatim."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            message,
            code="PERSISTENCE_ERROR",
            details={"operation": operation},
        )


class EntityNotFoundError(PersistenceError):
    """Requested entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(operation=f"get_{entity}", message=f"{entity.capitalize()} not found: {entity_id}")
        self.code = f"{entity.upper()}_NOT_FOUND"
        self.details.update({"entity": entity, "id": entity_id})


# Rendering / Export Exceptions
class RenderError(BillingError):
    """Required rendering input is missing; nothing is emitted."""

    def __init__(self, reason: str):
        super().__init__(
            f"Cannot render invoice: {reason}",
            code="RENDER_ERROR",
            details={"reason": reason},
        )


class ExportError(BillingError):
    """Export sink failed to save or print the document."""

    def __init__(self, mode: str, reason: str):
        super().__init__(
            f"Invoice {mode} failed: {reason}",
            code="EXPORT_ERROR",
            details={"mode": mode, "reason": reason},
        )


class ConfigurationError(BillingError):
    """Configuration error."""

    pass
