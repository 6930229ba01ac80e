"""MCP tool handler for update_entry (partial attribute update)."""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.entry_mutations import EntryResponse, UpdateEntryRequest
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def update_entry(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update some attributes of an entry, leaving the others unchanged.

    Changing ``status`` here appends the entry to the end of the new stage;
    use move_entry to place it at a specific index.

    Args:
        args: Dictionary containing:
            - owner_id (str): Owner of the entry
            - entry_id (int): Entry to update
            - attributes (dict): Fields to change
            - db_path (str, optional): Database path override

    Returns:
        {"entry": {...}} on success, or {"error": {...}} (NOT_FOUND when the
        entry is missing or owned by someone else).
    """
    try:
        request = UpdateEntryRequest.model_validate(args)
        store = EntryStore(request.db_path)
        entry = store.update(request.owner_id, request.entry_id, request.attributes)
        return EntryResponse(entry=entry).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
