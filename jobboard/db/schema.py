"""
Database path resolution and schema bootstrap for the applications table.

The bootstrap is idempotent: it is safe to run against an existing
database on every store start-up.
"""

import os
import sqlite3
from pathlib import Path
from typing import Optional

from jobboard.models.errors import create_db_error

# Default database path relative to repository root
DEFAULT_DB_PATH = "data/jobboard.db"


def resolve_db_path(db_path: Optional[str] = None) -> Path:
    """
    Resolve the database path with support for overrides and defaults.

    Resolution order:
    1. Provided db_path parameter
    2. JOBBOARD_DB environment variable
    3. JOBBOARD_ROOT/data/jobboard.db
    4. Default path: data/jobboard.db

    Args:
        db_path: Optional database path override

    Returns:
        Resolved absolute Path to the database
    """
    if db_path is not None:
        path_str = db_path
    else:
        db_env = os.getenv("JOBBOARD_DB")
        if db_env:
            path_str = db_env
        else:
            root_env = os.getenv("JOBBOARD_ROOT")
            if root_env:
                return Path(root_env) / "data" / "jobboard.db"
            path_str = DEFAULT_DB_PATH

    path = Path(path_str)

    # Relative paths resolve from the repository root
    if not path.is_absolute():
        current_file = Path(__file__).resolve()
        repo_root = current_file.parents[2]  # db/ -> jobboard/ -> repo/
        path = repo_root / path

    return path


def ensure_parent_dirs(db_path: Path) -> None:
    """
    Ensure parent directories exist for the database file.

    Args:
        db_path: Resolved database path

    Raises:
        PersistenceError: If directory creation fails
    """
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise create_db_error(
            f"Failed to create parent directories: {str(e)}", retryable=False, original_error=e
        ) from e


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """
    Create the applications table and its partition index if missing.

    The partition index covers the (owner, stage, archived) partition plus
    position, which is the access path for board loads and max-position
    lookups.

    Args:
        conn: Database connection

    Raises:
        PersistenceError: If schema creation fails
    """
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS applications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id TEXT NOT NULL,
                company_name TEXT NOT NULL,
                title TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'applied',
                applied_date TEXT NOT NULL,
                job_url TEXT,
                notes TEXT NOT NULL DEFAULT '',
                position INTEGER NOT NULL CHECK (position >= 1),
                archived INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_applications_partition
            ON applications(owner_id, status, archived, position)
        """)

        conn.commit()

    except sqlite3.Error as e:
        raise create_db_error(
            f"Failed to bootstrap schema: {str(e)}", retryable=False, original_error=e
        ) from e


def init_database(db_path: Optional[str] = None) -> Path:
    """
    Resolve the database path, create it if needed and bootstrap the schema.

    Args:
        db_path: Optional database path override

    Returns:
        Resolved absolute Path to the database

    Raises:
        PersistenceError: If the file cannot be created or the schema bootstrapped
    """
    resolved_path = resolve_db_path(db_path)
    ensure_parent_dirs(resolved_path)

    conn = None
    try:
        conn = sqlite3.connect(str(resolved_path))
        bootstrap_schema(conn)
    except sqlite3.Error as e:
        raise create_db_error(str(e), retryable=True, original_error=e) from e
    finally:
        if conn is not None:
            conn.close()

    return resolved_path
