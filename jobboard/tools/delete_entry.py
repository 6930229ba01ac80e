"""MCP tool handler for delete_entry."""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.entry_mutations import DeleteEntryRequest, DeleteEntryResponse
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def delete_entry(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Permanently delete an entry. The remaining entries keep their positions.

    Returns:
        {"id": int, "deleted": true} on success, or {"error": {...}}.
    """
    try:
        request = DeleteEntryRequest.model_validate(args)
        store = EntryStore(request.db_path)
        store.delete(request.owner_id, request.entry_id)
        return DeleteEntryResponse(id=request.entry_id, deleted=True).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
