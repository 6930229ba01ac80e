"""
MCP tool handler for search_entries.

Read-only, paginated free-text search over an owner's live or archived
entries.
"""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.config import get_config
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.search_entries import SearchEntriesRequest, SearchEntriesResponse
from jobboard.services.query_service import QueryService
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def search_entries(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Search entries by owner, archived state and optional text.

    Args:
        args: Dictionary containing:
            - owner_id (str): Owner whose entries are searched
            - archived (bool, optional): Search archived entries (default False)
            - search_text (str, optional): Case-insensitive substring matched
              against company name, title and notes
            - page (int, optional): 1-based page (default 1)
            - page_size (int, optional): Rows per page, clamped to 100
            - status (str, optional): Restrict to one stage
            - db_path (str, optional): Database path override

    Returns:
        Dictionary with structure:
        {
            "data": [...],
            "pagination": {"page", "page_size", "total_count", "total_pages"}
        }

        On error, returns {"error": {...}}.
    """
    try:
        request = SearchEntriesRequest.model_validate(args)
        service = QueryService(request.db_path, default_page_size=get_config().default_page_size)
        result = service.search(
            request.owner_id,
            archived=request.archived,
            search_text=request.search_text,
            page=request.page,
            page_size=request.page_size,
            status=request.status,
        )
        return SearchEntriesResponse(**result).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
