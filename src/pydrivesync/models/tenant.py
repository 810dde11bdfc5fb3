"""Organisation settings and user profile models."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydrivesync._constants import SYSTEM_CONFIG, USERS
from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel


class UserRole(DriveSyncEnum):
    UNKNOWN = "unknown"
    ADMIN = "admin"
    OPERATOR = "operator"
    DRIVER = "driver"


class SystemConfig(DriveSyncModel):
    """The organisation running the fleet (a single row per deployment)."""

    COLLECTION: ClassVar[str] = SYSTEM_CONFIG

    id: str
    organization_name: str = ""
    city: str | None = None
    state: str | None = None
    logo_url: str | None = None
    primary_color: str = "#2563eb"
    secondary_color: str = "#1e40af"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def location(self) -> str:
        """``"City - ST"`` or whichever part is known."""
        return " - ".join(part for part in (self.city, self.state) if part)


class UserProfile(DriveSyncModel):
    """Application profile of an operator, admin or driver.

    ``role`` is stored as reported; no permission checks are derived
    from it.
    """

    COLLECTION: ClassVar[str] = USERS

    id: str
    email: str = ""
    name: str = ""
    role: UserRole = UserRole.UNKNOWN
    avatar_url: str | None = None
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
