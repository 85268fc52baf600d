"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, DataStoreProtocol, DayAvailability
from .booking import BookingRequest, BookingService
from .catalogue import CatalogueService
from .guard import run_guarded, run_guarded_async

__all__ = [
    "AvailabilityService",
    "DataStoreProtocol",
    "DayAvailability",
    "BookingRequest",
    "BookingService",
    "CatalogueService",
    "run_guarded",
    "run_guarded_async",
]
