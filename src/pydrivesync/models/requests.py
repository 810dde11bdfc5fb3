"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by the store, the fetcher and the identity
provider.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pydrivesync._constants import ALL_FIELDS

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def normalize_selection(selection: str | Sequence[str] | None) -> str:
    """Collapse a selection descriptor into its wire form.

    ``None``, ``""`` and ``"*"`` all mean "all fields". Sequences of field
    names are joined with commas; surrounding whitespace is dropped.
    """
    if selection is None:
        return ALL_FIELDS
    if isinstance(selection, str):
        parts = [part.strip() for part in selection.split(",")]
    else:
        parts = [str(part).strip() for part in selection]
    parts = [part for part in parts if part]
    if not parts or ALL_FIELDS in parts:
        return ALL_FIELDS
    return ",".join(parts)


class CollectionReadRequest(BaseModel):
    """A read of one collection with a field selection."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    collection: str
    selection: str = ALL_FIELDS
    limit: int | None = Field(default=None, ge=1)

    @field_validator("collection")
    @classmethod
    def _collection_identifier(cls, value: str) -> str:
        collection = value.strip()
        if not collection:
            raise ValueError("collection must be non-empty")
        if not _IDENTIFIER.match(collection):
            raise ValueError(f"collection must be an identifier, got {collection!r}")
        return collection

    @field_validator("selection", mode="before")
    @classmethod
    def _normalize_selection(cls, value: Any) -> str:
        return normalize_selection(value)

    def query_params(self) -> dict[str, str]:
        params = {"select": self.selection}
        if self.limit is not None:
            params["limit"] = str(self.limit)
        return params


class SignInRequest(BaseModel):
    """Password sign-in credentials."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    identifier: str
    secret: str = Field(repr=False)

    @field_validator("identifier")
    @classmethod
    def _identifier_non_empty(cls, value: str) -> str:
        identifier = value.strip()
        if not identifier:
            raise ValueError("identifier must be non-empty")
        return identifier
