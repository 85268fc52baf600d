"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    Appointment,
    AppointmentStatus,
    Service,
    StaffMember,
    StaffRole,
    TimeRange,
    WorkingWindow,
)
from .slot_planner import SlotPlanner
from .throttle import THROTTLE_LIMITS, AttemptThrottle, ThrottleConfig, ThrottleRecord, attempt_throttle

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Service",
    "StaffMember",
    "StaffRole",
    "TimeRange",
    "WorkingWindow",
    "SlotPlanner",
    "THROTTLE_LIMITS",
    "AttemptThrottle",
    "ThrottleConfig",
    "ThrottleRecord",
    "attempt_throttle",
]
