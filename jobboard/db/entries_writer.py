"""
Database writer layer for application entries.

Provides owner-scoped write access to the applications table with
transaction management and atomic batch semantics.
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

from jobboard.db.entries_reader import ENTRY_COLUMNS, row_to_dict
from jobboard.db.schema import ensure_parent_dirs, resolve_db_path
from jobboard.models.errors import create_db_error
from jobboard.models.status import ApplicationStatus

# Attribute columns that a partial update may touch
UPDATABLE_COLUMNS = ("company_name", "title", "status", "applied_date", "job_url", "notes")


class EntriesWriter:
    """
    Context manager for write operations on the applications table.

    Provides transaction management with automatic rollback on exceptions
    and guaranteed connection cleanup. Nothing is persisted unless
    ``commit()`` is called.

    Usage:
        with EntriesWriter(db_path) as writer:
            owned = writer.filter_owned_ids("owner-1", [1, 2, 3])
            for entry_id in owned:
                writer.update_entry_position("owner-1", entry_id, 1, None, timestamp)
            writer.commit()
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize writer with database path.

        Args:
            db_path: Optional database path override
        """
        self.db_path = db_path
        self.resolved_path: Optional[Path] = None
        self.conn: Optional[sqlite3.Connection] = None
        self._in_transaction = False

    def __enter__(self):
        """
        Open connection and begin transaction.

        Returns:
            self: The EntriesWriter instance

        Raises:
            PersistenceError: If the connection cannot be opened
        """
        self.resolved_path = resolve_db_path(self.db_path)
        ensure_parent_dirs(self.resolved_path)

        try:
            self.conn = sqlite3.connect(str(self.resolved_path))
            self.conn.row_factory = sqlite3.Row

            self.conn.execute("BEGIN")
            self._in_transaction = True

            return self

        except sqlite3.OperationalError as e:
            raise create_db_error(str(e), retryable=True, original_error=e) from e

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Rollback on exception, close connection always.

        Returns:
            False to propagate exceptions
        """
        try:
            if exc_type is not None and self._in_transaction:
                self.rollback()
        finally:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

        return False

    def _require_connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise create_db_error("Connection not established", retryable=False)
        return self.conn

    def next_position(self, owner_id: str, status: ApplicationStatus) -> int:
        """
        Compute the position for an entry appended to a partition.

        The max covers every entry of the owner in that stage, archived or
        not, so unarchiving never collides with a newer sibling.

        Args:
            owner_id: Partition owner
            status: Partition stage

        Returns:
            max(position) + 1, or 1 for an empty partition

        Raises:
            PersistenceError: If query execution fails
        """
        conn = self._require_connection()
        try:
            row = conn.execute(
                """
                SELECT COALESCE(MAX(position), 0) + 1
                FROM applications
                WHERE owner_id = ? AND status = ?
                """,
                (owner_id, status.value),
            ).fetchone()
            return int(row[0])

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def fetch_entry(self, owner_id: str, entry_id: int) -> Optional[Dict[str, Any]]:
        """
        Read one owned entry inside the current transaction.

        Returns:
            Entry as dictionary, or None when missing or not owned

        Raises:
            PersistenceError: If query execution fails
        """
        conn = self._require_connection()
        columns = ", ".join(ENTRY_COLUMNS)
        try:
            row = conn.execute(
                f"SELECT {columns} FROM applications WHERE id = ? AND owner_id = ?",
                (entry_id, owner_id),
            ).fetchone()
            return row_to_dict(row) if row is not None else None

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def insert_entry(
        self,
        owner_id: str,
        attributes: Dict[str, Any],
        status: ApplicationStatus,
        position: int,
        timestamp: str,
    ) -> int:
        """
        Insert a new entry.

        Args:
            owner_id: Owner of the new entry
            attributes: Validated descriptive attributes
            status: Initial stage
            position: Initial position within the partition
            timestamp: ISO 8601 UTC timestamp for created_at and updated_at

        Returns:
            The new entry id

        Raises:
            PersistenceError: If INSERT execution fails
        """
        conn = self._require_connection()
        try:
            cursor = conn.execute(
                """
                INSERT INTO applications (
                    owner_id,
                    company_name,
                    title,
                    status,
                    applied_date,
                    job_url,
                    notes,
                    position,
                    archived,
                    created_at,
                    updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    owner_id,
                    attributes["company_name"],
                    attributes["title"],
                    status.value,
                    attributes["applied_date"],
                    attributes.get("job_url"),
                    attributes.get("notes", ""),
                    position,
                    timestamp,
                    timestamp,
                ),
            )
            return int(cursor.lastrowid)

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def update_entry_fields(
        self, owner_id: str, entry_id: int, fields: Dict[str, Any], timestamp: str
    ) -> int:
        """
        Apply a partial attribute update to one owned entry.

        Only the supplied columns are written; ``position`` may be included
        alongside ``status`` when a stage change re-homes the entry.

        Args:
            owner_id: Owner the entry must belong to
            entry_id: Entry id
            fields: Column -> new value
            timestamp: ISO 8601 UTC timestamp for updated_at

        Returns:
            Number of rows updated (0 when the entry is not owned)

        Raises:
            PersistenceError: If UPDATE execution fails or a column is not writable
        """
        conn = self._require_connection()

        unknown = [name for name in fields if name not in UPDATABLE_COLUMNS and name != "position"]
        if unknown:
            raise create_db_error(f"Columns are not writable: {', '.join(unknown)}")

        assignments = [f"{name} = ?" for name in fields]
        assignments.append("updated_at = ?")
        params = [*fields.values(), timestamp, entry_id, owner_id]

        try:
            cursor = conn.execute(
                f"UPDATE applications SET {', '.join(assignments)} WHERE id = ? AND owner_id = ?",
                params,
            )
            return cursor.rowcount

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def filter_owned_ids(self, owner_id: str, entry_ids: Iterable[int]) -> Set[int]:
        """
        Return the subset of entry ids that exist and belong to owner_id.

        Raises:
            PersistenceError: If query execution fails
        """
        conn = self._require_connection()
        ids = list(entry_ids)
        if not ids:
            return set()

        placeholders = ",".join("?" * len(ids))
        try:
            rows = conn.execute(
                f"SELECT id FROM applications WHERE owner_id = ? AND id IN ({placeholders})",
                [owner_id, *ids],
            ).fetchall()
            return {row["id"] for row in rows}

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def update_entry_position(
        self,
        owner_id: str,
        entry_id: int,
        position: int,
        status: Optional[ApplicationStatus],
        timestamp: str,
    ) -> int:
        """
        Write a position, and optionally a new stage, for one owned entry.

        Returns:
            Number of rows updated

        Raises:
            PersistenceError: If UPDATE execution fails
        """
        conn = self._require_connection()
        try:
            if status is None:
                cursor = conn.execute(
                    """
                    UPDATE applications
                    SET position = ?,
                        updated_at = ?
                    WHERE id = ? AND owner_id = ?
                    """,
                    (position, timestamp, entry_id, owner_id),
                )
            else:
                cursor = conn.execute(
                    """
                    UPDATE applications
                    SET position = ?,
                        status = ?,
                        updated_at = ?
                    WHERE id = ? AND owner_id = ?
                    """,
                    (position, status.value, timestamp, entry_id, owner_id),
                )
            return cursor.rowcount

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def set_archived(self, owner_id: str, entry_id: int, archived: bool, timestamp: str) -> int:
        """
        Set the archived flag of one owned entry. Position is left untouched.

        Returns:
            Number of rows updated

        Raises:
            PersistenceError: If UPDATE execution fails
        """
        conn = self._require_connection()
        try:
            cursor = conn.execute(
                """
                UPDATE applications
                SET archived = ?,
                    updated_at = ?
                WHERE id = ? AND owner_id = ?
                """,
                (1 if archived else 0, timestamp, entry_id, owner_id),
            )
            return cursor.rowcount

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def delete_entry(self, owner_id: str, entry_id: int) -> int:
        """
        Delete one owned entry. Siblings are not renumbered.

        Returns:
            Number of rows deleted

        Raises:
            PersistenceError: If DELETE execution fails
        """
        conn = self._require_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM applications WHERE id = ? AND owner_id = ?",
                (entry_id, owner_id),
            )
            return cursor.rowcount

        except sqlite3.Error as e:
            raise create_db_error(str(e), retryable=False, original_error=e) from e

    def commit(self) -> None:
        """
        Commit the transaction.

        Raises:
            PersistenceError: If commit fails
        """
        conn = self._require_connection()

        if not self._in_transaction:
            return

        try:
            conn.commit()
            self._in_transaction = False

        except sqlite3.Error as e:
            raise create_db_error(
                f"Failed to commit transaction: {str(e)}", retryable=True, original_error=e
            ) from e

    def rollback(self) -> None:
        """
        Rollback the transaction.

        Rollback errors are suppressed since rollback runs during error
        handling and the original error is the one worth propagating.
        """
        if self.conn is None:
            return

        if not self._in_transaction:
            return

        try:
            self.conn.rollback()
            self._in_transaction = False
        except sqlite3.Error:
            pass
