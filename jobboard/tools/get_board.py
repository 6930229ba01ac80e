"""MCP tool handler for get_board: the live board grouped by stage."""

from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.models.status import board_stages
from jobboard.schemas.search_entries import GetBoardRequest, GetBoardResponse
from jobboard.services.board_controller import BoardController, board_to_dict
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error


def get_board(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return the owner's non-archived entries grouped by stage.

    Every stage is present, in column order, each sorted by position.

    Returns:
        {"stages": [...], "board": {stage: [...]}, "count": int} on success,
        or {"error": {...}}.
    """
    try:
        request = GetBoardRequest.model_validate(args)
        controller = BoardController(EntryStore(request.db_path), request.owner_id)
        board = controller.load()
        return GetBoardResponse(
            stages=[stage.value for stage in board_stages()],
            board=board_to_dict(board),
            count=sum(len(entries) for entries in board.values()),
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
