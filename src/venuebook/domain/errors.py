"""Engine error taxonomy.

A detected scheduling conflict is a normal result, not an error. Store
failures (psycopg2.Error and friends) are never wrapped and propagate as-is.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for errors raised by the booking engine."""

    code = "ENGINE_ERROR"


class NotFoundError(EngineError):
    """Raised when a zone id does not resolve."""

    code = "NOT_FOUND"

    def __init__(self, zone_id: str) -> None:
        self.zone_id = zone_id
        super().__init__(f"Zone {zone_id} not found")


class ValidationError(EngineError):
    """Raised for malformed ranges or recurrence patterns."""

    code = "VALIDATION"


class LimitExceededError(EngineError):
    """Raised when a recurrence expansion would exceed the configured cap."""

    code = "LIMIT_EXCEEDED"

    def __init__(self, limit: str, requested: int, maximum: int) -> None:
        self.limit = limit
        self.requested = requested
        self.maximum = maximum
        super().__init__(f"{limit} of {requested} exceeds maximum of {maximum}")


class ReservationConflictError(Exception):
    """Raised when a direct booking overlaps an occupying reservation."""

    def __init__(
        self,
        zone_id: str,
        conflicting_reservation_ids: list[str],
        alternative_zone_ids: list[str] | None = None,
    ) -> None:
        self.zone_id = zone_id
        self.conflicting_reservation_ids = conflicting_reservation_ids
        self.alternative_zone_ids = alternative_zone_ids or []
        super().__init__(
            f"Zone {zone_id} has conflicting reservations "
            f"({', '.join(conflicting_reservation_ids)})"
        )
