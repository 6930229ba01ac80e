"""
MCP tool handler for move_entry.

Wraps the board controller: loads the owner's board, computes the move,
persists it as one atomic batch and returns the refreshed board.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import ToolError, create_internal_error
from jobboard.schemas.move_entry import MoveEntryRequest, MoveEntryResponse
from jobboard.services.board_controller import BoardController, board_to_dict
from jobboard.utils.ordering import END_OF_STAGE
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def move_entry(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Move an entry within its stage or to another stage.

    Args:
        args: Dictionary containing:
            - owner_id (str): Owner of the board
            - entry_id (int): Entry being moved
            - drop_target_id (int|str, optional): A stage value (drop at its
              end) or another entry id (take that entry's slot)
            - target_status (str, optional): Destination stage, used instead
              of drop_target_id
            - target_index (int|"end", optional): Zero-based index within
              target_status; defaults to the end of the stage
            - db_path (str, optional): Database path override

    Returns:
        Dictionary with structure:
        {
            "moved": bool,       # False when the move changed nothing
            "updates": [...],    # {id, position, status?} that were persisted
            "board": {...}       # stage -> entries after the move
        }

        On error, returns {"error": {...}}. INVALID_TARGET for an unknown
        stage or drop target, NOT_FOUND when the entry is not on the board.
        Nothing is persisted on error.
    """
    try:
        request = MoveEntryRequest.model_validate(args)
        store = EntryStore(request.db_path)
        controller = BoardController(store, request.owner_id)

        if request.drop_target_id is not None:
            outcome = controller.move(request.entry_id, request.drop_target_id)
        else:
            target_index = END_OF_STAGE if request.target_index is None else request.target_index
            outcome = controller.move_to(request.entry_id, request.target_status, target_index)

        logger.info(
            "move_entry %s for owner %s: moved=%s, %d updates",
            request.entry_id,
            request.owner_id,
            outcome.moved,
            len(outcome.updates),
        )
        return MoveEntryResponse(
            **outcome.to_dict(), board=board_to_dict(controller.board)
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
