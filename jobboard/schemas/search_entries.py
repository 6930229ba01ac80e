"""Pydantic schemas for the search_entries and get_board tools."""

from __future__ import annotations

from typing import Optional

from jobboard.schemas.common import DbPathMixin, OwnerMixin, StrictIgnoreRequest, StrictResponse
from jobboard.schemas.entry import EntryRecord


class SearchEntriesRequest(OwnerMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for search_entries.

    Paging bounds are checked by the query service, which clamps
    page_size instead of rejecting it.
    """

    archived: bool = False
    search_text: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    status: Optional[str] = None


class PaginationInfo(StrictResponse):
    page: int
    page_size: int
    total_count: int
    total_pages: int


class SearchEntriesResponse(StrictResponse):
    """Response schema for search_entries."""

    data: list[EntryRecord]
    pagination: PaginationInfo


class GetBoardRequest(OwnerMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for get_board."""


class GetBoardResponse(StrictResponse):
    """Response schema for get_board: stages in column order plus entries per stage."""

    stages: list[str]
    board: dict[str, list[EntryRecord]]
    count: int
