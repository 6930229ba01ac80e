#!/usr/bin/env python3
"""
MCP Server entry point for the job application board.

Exposes the board's entry CRUD, drag-and-drop moves, board listing and
paginated search as tools over the Model Context Protocol.

Usage:
    python -m jobboard.server

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from jobboard.config import get_config
from jobboard.tools.create_entry import create_entry
from jobboard.tools.delete_entry import delete_entry
from jobboard.tools.get_board import get_board
from jobboard.tools.move_entry import move_entry
from jobboard.tools.search_entries import search_entries
from jobboard.tools.set_archived import set_archived
from jobboard.tools.update_entry import update_entry

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server manages a personal job application board. "
        "Entries are grouped into stages (applied, interviewing, offering, accepted, "
        "rejected, withdrawn) and ordered by position within each stage."
        "\n\n"
        "ENTRY TOOLS:\n"
        "Use create_entry to add an application at the end of its stage. "
        "Use update_entry to change attributes; a status change there appends to the new stage. "
        "Use set_archived to hide or restore an entry without losing its position. "
        "Use delete_entry to remove an entry permanently."
        "\n\n"
        "BOARD TOOLS:\n"
        "Use get_board to read the live board grouped by stage. "
        "Use move_entry to reorder within a stage or move across stages; "
        "every affected position is persisted in one atomic batch."
        "\n\n"
        "SEARCH:\n"
        "Use search_entries for paginated, case-insensitive search over company, title and notes, "
        "ordered by applied date."
    ),
)


def _base_args(owner_id: Optional[str], db_path: Optional[str]) -> Dict[str, Any]:
    """Start an args dict, falling back to the configured owner."""
    args: Dict[str, Any] = {}
    resolved_owner = owner_id if owner_id is not None else config.default_owner_id
    if resolved_owner is not None:
        args["owner_id"] = resolved_owner
    if db_path is not None:
        args["db_path"] = db_path
    return args


@mcp.tool(
    name="create_entry",
    description=(
        "Create a job application entry. Requires company_name, title and applied_date (YYYY-MM-DD); "
        "job_url, notes and status are optional. The entry is placed at the end of its stage."
    ),
)
def create_entry_tool(
    company_name: str,
    title: str,
    applied_date: str,
    job_url: str | None = None,
    notes: str | None = None,
    status: str | None = None,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Create a job application entry.

    Args:
        company_name: Company applied to (required, max 255 chars).
        title: Role title (required, max 255 chars).
        applied_date: Application date as YYYY-MM-DD.
        job_url: Optional posting URL.
        notes: Optional free-text notes (max 500 chars).
        status: Initial stage (default 'applied').
        owner_id: Board owner (default: JOBBOARD_OWNER_ID).
        db_path: Optional database path override.

    Returns:
        {"entry": {...}} or {"error": {"code", "message", "retryable"}}.
    """
    args = _base_args(owner_id, db_path)
    attributes: Dict[str, Any] = {
        "company_name": company_name,
        "title": title,
        "applied_date": applied_date,
    }
    if job_url is not None:
        attributes["job_url"] = job_url
    if notes is not None:
        attributes["notes"] = notes
    args["attributes"] = attributes
    if status is not None:
        args["status"] = status

    return create_entry(args)


@mcp.tool(
    name="update_entry",
    description=(
        "Update attributes of an existing entry. Only the supplied fields change. "
        "Pass job_url as an empty string to clear it. "
        "A new status appends the entry to the end of that stage."
    ),
)
def update_entry_tool(
    entry_id: int,
    company_name: str | None = None,
    title: str | None = None,
    applied_date: str | None = None,
    job_url: str | None = None,
    notes: str | None = None,
    status: str | None = None,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Partially update an entry.

    Args:
        entry_id: Entry to update.
        company_name, title, applied_date, job_url, notes, status: Fields to change.
            An empty job_url clears the stored URL.
        owner_id: Board owner (default: JOBBOARD_OWNER_ID).
        db_path: Optional database path override.

    Returns:
        {"entry": {...}} or {"error": {...}}.
    """
    args = _base_args(owner_id, db_path)
    args["entry_id"] = entry_id
    supplied = {
        "company_name": company_name,
        "title": title,
        "applied_date": applied_date,
        "job_url": job_url,
        "notes": notes,
        "status": status,
    }
    # None means "not supplied"; an empty job_url is forwarded and validates to a clear.
    args["attributes"] = {key: value for key, value in supplied.items() if value is not None}

    return update_entry(args)


@mcp.tool(
    name="delete_entry",
    description="Permanently delete an entry. Other entries keep their positions.",
)
def delete_entry_tool(
    entry_id: int,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Delete an entry.

    Returns:
        {"id": int, "deleted": true} or {"error": {...}}.
    """
    args = _base_args(owner_id, db_path)
    args["entry_id"] = entry_id
    return delete_entry(args)


@mcp.tool(
    name="set_archived",
    description=(
        "Archive (archived=true) or unarchive (archived=false) an entry. "
        "Archived entries leave the board and only appear in archived searches."
    ),
)
def set_archived_tool(
    entry_id: int,
    archived: bool,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Archive or unarchive an entry.

    Returns:
        {"entry": {...}} or {"error": {...}}.
    """
    args = _base_args(owner_id, db_path)
    args["entry_id"] = entry_id
    args["archived"] = archived
    return set_archived(args)


@mcp.tool(
    name="move_entry",
    description=(
        "Move an entry on the board. Pass drop_target_id (a stage name, or another entry id whose "
        "slot the entry takes) or target_status with an optional zero-based target_index "
        "(default: end of stage). Returns the persisted updates and the refreshed board."
    ),
)
def move_entry_tool(
    entry_id: int,
    drop_target_id: int | str | None = None,
    target_status: str | None = None,
    target_index: int | str | None = None,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Reorder an entry within a stage or move it to another stage.

    Args:
        entry_id: Entry being moved.
        drop_target_id: Stage value or entry id the entry was dropped on.
        target_status: Destination stage (alternative to drop_target_id).
        target_index: Zero-based index in target_status, or "end".
        owner_id: Board owner (default: JOBBOARD_OWNER_ID).
        db_path: Optional database path override.

    Returns:
        {"moved": bool, "updates": [...], "board": {...}} or {"error": {...}}.
    """
    args = _base_args(owner_id, db_path)
    args["entry_id"] = entry_id
    if drop_target_id is not None:
        args["drop_target_id"] = drop_target_id
    if target_status is not None:
        args["target_status"] = target_status
    if target_index is not None:
        args["target_index"] = target_index

    return move_entry(args)


@mcp.tool(
    name="get_board",
    description="Return the live (non-archived) board: every stage in column order with its entries by position.",
)
def get_board_tool(
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Read the board.

    Returns:
        {"stages": [...], "board": {stage: [...]}, "count": int} or {"error": {...}}.
    """
    return get_board(_base_args(owner_id, db_path))


@mcp.tool(
    name="search_entries",
    description=(
        "Search entries with pagination. Filters by archived state and optional stage; "
        "search_text matches company name, title or notes case-insensitively. "
        "page_size defaults to 20 and is capped at 100."
    ),
)
def search_entries_tool(
    archived: bool = False,
    search_text: str | None = None,
    page: int = 1,
    page_size: int | None = None,
    status: str | None = None,
    owner_id: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Paginated search over an owner's entries.

    Args:
        archived: Search archived entries instead of live ones.
        search_text: Optional case-insensitive substring.
        page: 1-based page number.
        page_size: Rows per page (default 20, max 100).
        status: Optional stage filter.
        owner_id: Board owner (default: JOBBOARD_OWNER_ID).
        db_path: Optional database path override.

    Returns:
        {"data": [...], "pagination": {"page", "page_size", "total_count", "total_pages"}}
        or {"error": {...}}.
    """
    args = _base_args(owner_id, db_path)
    args["archived"] = archived
    args["page"] = page
    if search_text is not None:
        args["search_text"] = search_text
    if page_size is not None:
        args["page_size"] = page_size
    if status is not None:
        args["status"] = status

    return search_entries(args)


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    config.setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Starting job board MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Database path: {config.db_path}")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
