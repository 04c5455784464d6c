"""Clock used to stamp created_at / updated_at on generated reservations."""

from collections.abc import Callable
from datetime import datetime, timezone

# Injected wherever "now" is needed so tests can pin it
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
