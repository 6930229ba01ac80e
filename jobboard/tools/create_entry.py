"""
MCP tool handler for create_entry.

Validates the request, creates the entry at the end of its stage and returns
it in the fixed entry schema.
"""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.entry_mutations import CreateEntryRequest, EntryResponse
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def create_entry(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new application entry.

    Args:
        args: Dictionary containing:
            - owner_id (str): Owner of the entry
            - attributes (dict): company_name, title, applied_date (required),
              job_url, notes, status (optional)
            - status (str, optional): Initial stage, overrides attributes.status
            - db_path (str, optional): Database path override

    Returns:
        {"entry": {...}} on success.

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR, DB_ERROR, ...
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = CreateEntryRequest.model_validate(args)
        store = EntryStore(request.db_path)
        entry = store.create(request.owner_id, request.attributes, status=request.status)
        return EntryResponse(entry=entry).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
