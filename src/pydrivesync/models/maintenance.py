"""Maintenance reminder model."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import field_validator

from pydrivesync._constants import MAINTENANCE_REMINDERS
from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel, safe_float


class ReminderStatus(DriveSyncEnum):
    UNKNOWN = "unknown"
    OPEN = "open"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MaintenanceReminder(DriveSyncModel):
    """A maintenance reminder due by date and/or mileage."""

    COLLECTION: ClassVar[str] = MAINTENANCE_REMINDERS

    id: str
    vehicle_id: str = ""
    type: str = ""
    due_date: date | None = None
    due_mileage: float | None = None
    description: str | None = None
    status: ReminderStatus = ReminderStatus.UNKNOWN
    completion_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.status is ReminderStatus.OPEN

    def is_overdue(self, today: date, current_mileage: float | None = None) -> bool:
        """Open reminder whose due date or due mileage has been reached."""
        if not self.is_open:
            return False
        if self.due_date is not None and self.due_date <= today:
            return True
        return self.due_mileage is not None and current_mileage is not None and current_mileage >= self.due_mileage

    @field_validator("due_mileage", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> float | None:
        return safe_float(value)
