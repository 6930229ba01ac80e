"""Pydantic schemas for the create/update/delete/set_archived tools."""

from __future__ import annotations

from typing import Any, Optional

from jobboard.schemas.common import (
    DbPathMixin,
    EntryIdMixin,
    OwnerMixin,
    StrictIgnoreRequest,
    StrictResponse,
)
from jobboard.schemas.entry import EntryRecord


class CreateEntryRequest(OwnerMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for create_entry.

    ``attributes`` is validated by the store against EntryCreate so that
    attribute errors report the attribute name as the field.
    """

    attributes: dict[str, Any]
    status: Optional[str] = None


class UpdateEntryRequest(OwnerMixin, EntryIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for update_entry."""

    attributes: dict[str, Any]


class DeleteEntryRequest(OwnerMixin, EntryIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for delete_entry."""


class SetArchivedRequest(OwnerMixin, EntryIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for set_archived."""

    archived: bool


class EntryResponse(StrictResponse):
    """Single-entry response of create_entry, update_entry and set_archived."""

    entry: EntryRecord


class DeleteEntryResponse(StrictResponse):
    """Response schema for delete_entry."""

    id: int
    deleted: bool
