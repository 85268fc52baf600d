"""
Domain-specific exception hierarchy for the booking engine.

The slot planner and the attempt throttle never raise; these errors belong
to the service layer around them.
"""


class SlotkeeperError(Exception):
    """Base class for all application-level errors."""


class DataStoreError(SlotkeeperError):
    """Raised when records cannot be read from or written to the datastore."""


class NotFoundError(DataStoreError):
    """Raised when a referenced service, staff member or appointment does not exist."""


class SlotUnavailableError(SlotkeeperError):
    """Raised when a requested slot is no longer offered or was taken meanwhile."""


class ThrottledError(SlotkeeperError):
    """Raised when a guarded action is refused by the attempt throttle."""

    def __init__(self, key: str, remaining_seconds: int):
        self.key = key
        self.remaining_seconds = remaining_seconds
        super().__init__(
            f"Too many attempts for '{key}'. Try again in {remaining_seconds} seconds."
        )
