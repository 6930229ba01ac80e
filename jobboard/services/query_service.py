"""
Query service: filtered, paginated, searchable reads over the entry store.

Independent of ordering: results are sorted by applied date, never by
board position.
"""

from typing import Any, Dict, Optional

from jobboard.db.entries_reader import count_search_results, get_connection, query_search_page
from jobboard.db.entry_store import to_entry_schema
from jobboard.db.schema import init_database
from jobboard.models.errors import create_validation_error
from jobboard.models.status import parse_status
from jobboard.utils.pagination import build_pagination, compute_offset
from jobboard.utils.validation import (
    DEFAULT_PAGE_SIZE,
    clamp_page_size,
    normalize_search_text,
    validate_owner_id,
    validate_page,
)


class QueryService:
    """Search over one database of application entries."""

    def __init__(self, db_path: Optional[str] = None, default_page_size: int = DEFAULT_PAGE_SIZE):
        self.db_path = str(init_database(db_path))
        self.default_page_size = default_page_size

    def search(
        self,
        owner_id: str,
        archived: bool = False,
        search_text: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        status=None,
    ) -> Dict[str, Any]:
        """
        Search an owner's entries.

        Ownership and archived state always filter the set. A non-blank
        search_text additionally requires a case-insensitive substring match
        on company name, title or notes. Page sizes above the maximum are
        clamped, and the clamped value is reported in the pagination block.

        Args:
            owner_id: Owner whose entries are searched
            archived: Search archived (True) or live (False) entries
            search_text: Optional free-text filter
            page: 1-based page number (default 1)
            page_size: Rows per page (default from configuration, max 100)
            status: Optional stage filter

        Returns:
            Dictionary with structure:
            {
                "data": [...],           # Entries of the requested page
                "pagination": {
                    "page": int,
                    "page_size": int,    # Effective (clamped) page size
                    "total_count": int,  # Filtered set size before paging
                    "total_pages": int   # ceil(total_count / page_size)
                }
            }

        Raises:
            ValidationError: If a paging argument is invalid
            InvalidTargetError: If status is not a known stage
            PersistenceError: If the query fails
        """
        owner_id = validate_owner_id(owner_id)
        if not isinstance(archived, bool):
            raise create_validation_error(
                f"Invalid archived type: expected boolean, got {type(archived).__name__}",
                field="archived",
            )
        text = normalize_search_text(search_text)
        page = validate_page(page)
        size = clamp_page_size(page_size, default=self.default_page_size)
        stage = parse_status(status).value if status is not None else None

        with get_connection(self.db_path) as conn:
            total_count = count_search_results(conn, owner_id, archived, text, stage)
            rows = query_search_page(
                conn,
                owner_id,
                archived,
                limit=size,
                offset=compute_offset(page, size),
                search_text=text,
                status=stage,
            )

        return {
            "data": [to_entry_schema(row) for row in rows],
            "pagination": build_pagination(page, size, total_count),
        }
