"""Pydantic schemas for the move_entry tool."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import model_validator

from jobboard.schemas.common import (
    DbPathMixin,
    EntryIdMixin,
    OwnerMixin,
    StrictIgnoreRequest,
    StrictResponse,
)


class MoveEntryRequest(OwnerMixin, EntryIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for move_entry.

    Either a drop target (a stage value or another entry id) or an explicit
    target_status with an optional target_index.
    """

    drop_target_id: Optional[Union[int, str]] = None
    target_status: Optional[str] = None
    target_index: Optional[Union[int, str]] = None

    @model_validator(mode="after")
    def validate_target(self) -> "MoveEntryRequest":
        if self.drop_target_id is None and self.target_status is None:
            raise ValueError("Invalid move: provide drop_target_id or target_status")
        if self.drop_target_id is not None and self.target_status is not None:
            raise ValueError("Invalid move: drop_target_id and target_status are mutually exclusive")
        if self.target_index is not None and self.target_status is None:
            raise ValueError("Invalid move: target_index requires target_status")
        return self


class MoveEntryResponse(StrictResponse):
    """Response schema for move_entry."""

    moved: bool
    updates: list[dict[str, Any]]
    board: dict[str, list[dict[str, Any]]]
