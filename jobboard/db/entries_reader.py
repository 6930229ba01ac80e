"""
Database reader layer for application entries.

Provides read-only access to the applications table: owner-scoped lookups
for the board and filtered, paginated search for the query service.
"""

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

from jobboard.db.schema import resolve_db_path
from jobboard.models.errors import (
    create_db_error,
    create_db_not_found_error,
)

ENTRY_COLUMNS = (
    "id",
    "owner_id",
    "company_name",
    "title",
    "status",
    "applied_date",
    "job_url",
    "notes",
    "position",
    "archived",
    "created_at",
    "updated_at",
)

_SELECT_COLUMNS = ", ".join(ENTRY_COLUMNS)


def _py_lower(value: Any) -> Any:
    """Unicode-aware lowercase for SQL; SQLite's LOWER() only folds ASCII."""
    if isinstance(value, str):
        return value.lower()
    return value


@contextmanager
def get_connection(db_path: Optional[str] = None):
    """
    Context manager for read-only SQLite database connections.

    Ensures connections are always properly closed, even on errors.

    Args:
        db_path: Optional database path override

    Yields:
        sqlite3.Connection: Database connection

    Raises:
        PersistenceError: If database file doesn't exist or connection fails
    """
    resolved_path = resolve_db_path(db_path)

    if not resolved_path.exists() or not resolved_path.is_file():
        raise create_db_not_found_error(str(resolved_path))

    conn = None
    try:
        uri = f"file:{resolved_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
        conn.row_factory = sqlite3.Row
        conn.create_function("py_lower", 1, _py_lower, deterministic=True)

        yield conn

    except sqlite3.OperationalError as e:
        error_msg = str(e)
        if "unable to open database" in error_msg.lower():
            raise create_db_not_found_error(str(resolved_path)) from e
        else:
            raise create_db_error(error_msg, retryable=True, original_error=e) from e

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e

    finally:
        if conn is not None:
            conn.close()


def row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    """Convert an applications row to a plain dictionary."""
    return {column: row[column] for column in ENTRY_COLUMNS}


def query_entry(conn: sqlite3.Connection, owner_id: str, entry_id: int) -> Optional[Dict[str, Any]]:
    """
    Fetch one entry scoped to its owner.

    Args:
        conn: Database connection
        owner_id: Owner the entry must belong to
        entry_id: Entry id

    Returns:
        Entry as dictionary, or None when missing or owned by someone else

    Raises:
        PersistenceError: If query execution fails
    """
    try:
        row = conn.execute(
            f"SELECT {_SELECT_COLUMNS} FROM applications WHERE id = ? AND owner_id = ?",
            (entry_id, owner_id),
        ).fetchone()
        return row_to_dict(row) if row is not None else None

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def query_entries_by_owner(
    conn: sqlite3.Connection, owner_id: str, include_archived: bool = False
) -> List[Dict[str, Any]]:
    """
    Fetch every entry of one owner.

    No particular order is promised; board callers sort by position
    themselves.

    Args:
        conn: Database connection
        owner_id: Owner whose entries are returned
        include_archived: Whether archived entries are included

    Returns:
        List of entries as dictionaries

    Raises:
        PersistenceError: If query execution fails
    """
    try:
        if include_archived:
            query = f"SELECT {_SELECT_COLUMNS} FROM applications WHERE owner_id = ? ORDER BY id"
            params: Tuple[Any, ...] = (owner_id,)
        else:
            query = (
                f"SELECT {_SELECT_COLUMNS} FROM applications "
                "WHERE owner_id = ? AND archived = 0 ORDER BY id"
            )
            params = (owner_id,)

        return [row_to_dict(row) for row in conn.execute(query, params).fetchall()]

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally (ESCAPE '\\')."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_filter(
    owner_id: str,
    archived: bool,
    search_text: Optional[str] = None,
    status: Optional[str] = None,
) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause shared by the search count and page queries.

    Ownership and archived state are always ANDed; the free-text match is a
    case-insensitive substring test ORed across company name, title and
    notes. Columns are lowered with py_lower, which get_connection
    registers, so non-ASCII capitals match too.

    Args:
        owner_id: Owner whose entries are searched
        archived: Archived state to match
        search_text: Optional normalized search text
        status: Optional stage value to match

    Returns:
        Tuple of (where_clause, params)
    """
    clauses = ["owner_id = ?", "archived = ?"]
    params: List[Any] = [owner_id, 1 if archived else 0]

    if status is not None:
        clauses.append("status = ?")
        params.append(status)

    if search_text:
        pattern = f"%{escape_like(search_text.lower())}%"
        clauses.append(
            "("
            "py_lower(company_name) LIKE ? ESCAPE '\\' "
            "OR py_lower(title) LIKE ? ESCAPE '\\' "
            "OR py_lower(notes) LIKE ? ESCAPE '\\'"
            ")"
        )
        params.extend([pattern, pattern, pattern])

    return " AND ".join(clauses), params


def count_search_results(
    conn: sqlite3.Connection,
    owner_id: str,
    archived: bool,
    search_text: Optional[str] = None,
    status: Optional[str] = None,
) -> int:
    """
    Count the filtered set before pagination.

    Raises:
        PersistenceError: If query execution fails
    """
    where, params = build_search_filter(owner_id, archived, search_text, status)
    try:
        row = conn.execute(f"SELECT COUNT(*) FROM applications WHERE {where}", params).fetchone()
        return int(row[0])

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e


def query_search_page(
    conn: sqlite3.Connection,
    owner_id: str,
    archived: bool,
    limit: int,
    offset: int,
    search_text: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch one page of the filtered set.

    Results are ordered by (applied_date ASC, id ASC); position plays no
    part here, it only orders the live board.

    Args:
        conn: Database connection
        owner_id: Owner whose entries are searched
        archived: Archived state to match
        limit: Page size
        offset: Number of rows to skip
        search_text: Optional normalized search text
        status: Optional stage value to match

    Returns:
        List of entries as dictionaries

    Raises:
        PersistenceError: If query execution fails
    """
    where, params = build_search_filter(owner_id, archived, search_text, status)
    query = f"""
        SELECT {_SELECT_COLUMNS}
        FROM applications
        WHERE {where}
        ORDER BY applied_date ASC, id ASC
        LIMIT ? OFFSET ?
    """
    try:
        rows = conn.execute(query, [*params, limit, offset]).fetchall()
        return [row_to_dict(row) for row in rows]

    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=False, original_error=e) from e
