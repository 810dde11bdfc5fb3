"""Base model and enum for DriveSync collection rows.

Every row model inherits from :class:`DriveSyncModel` which provides:

* A ``model_validator(mode="before")`` that drops ``None`` and blank
  strings so the field default is used.
* A ``raw`` dict that captures the original row.
* A ``COLLECTION`` class variable naming the remote collection the
  model is read from.

Status enums inherit from :class:`DriveSyncEnum` which adds an
``UNKNOWN`` member and a ``_missing_`` hook that returns ``UNKNOWN``
for any value without a mapped member.
"""

from __future__ import annotations

import enum
import math
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


class DriveSyncEnum(enum.StrEnum):
    """Base for row status enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> DriveSyncEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        unknown = cls.__members__.get("UNKNOWN")
        if unknown is not None:
            return unknown
        # Fallback: return first member
        return next(iter(cls))


class DriveSyncModel(BaseModel):
    """Base for collection row models."""

    COLLECTION: ClassVar[str] = ""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original row as returned by the store."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop empty values and stash the raw row."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        # Keep the caller's raw= when constructing with kwargs.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
