"""MCP tool handler for set_archived."""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.entry_mutations import EntryResponse, SetArchivedRequest
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def set_archived(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Archive or unarchive an entry.

    Archived entries leave the board but keep their stored position, so an
    unarchived entry may share a position with a sibling until the next
    reorder of that stage.

    Returns:
        {"entry": {...}} on success, or {"error": {...}}.
    """
    try:
        request = SetArchivedRequest.model_validate(args)
        store = EntryStore(request.db_path)
        entry = store.set_archived(request.owner_id, request.entry_id, request.archived)
        return EntryResponse(entry=entry).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
