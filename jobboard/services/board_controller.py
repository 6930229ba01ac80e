"""
Board controller: turns drag-and-drop gestures into persisted moves.

The controller holds a projection of the live board (entries grouped by
stage and sorted by position). The projection is a cache of the store,
refetched after every successful persist; it is never written to directly.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from jobboard.models.errors import create_invalid_target_error, create_not_found_error
from jobboard.models.status import ApplicationStatus, parse_status
from jobboard.schemas.entry import PositionUpdate
from jobboard.utils.ordering import (
    END_OF_STAGE,
    build_partitions,
    compute_move,
    group_by_status,
    positions_of,
)
from jobboard.utils.validation import validate_entry_id, validate_owner_id

logger = logging.getLogger(__name__)

Board = Dict[ApplicationStatus, List[Dict[str, Any]]]


class MoveOutcome:
    """Result of one move request."""

    def __init__(self, moved: bool, updates: Optional[List[PositionUpdate]] = None):
        self.moved = moved
        self.updates = list(updates or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "moved": self.moved,
            "updates": [update.to_dict() for update in self.updates],
        }

    def __repr__(self) -> str:
        return f"MoveOutcome(moved={self.moved}, updates={self.updates!r})"


def board_to_dict(board: Board) -> Dict[str, List[Dict[str, Any]]]:
    """Serialize a grouped board with stage values as keys, in column order."""
    return {stage.value: list(entries) for stage, entries in board.items()}


class BoardController:
    """Drag-and-drop front for one owner's board."""

    def __init__(self, store, owner_id: str):
        self.store = store
        self.owner_id = validate_owner_id(owner_id)
        self._board: Optional[Board] = None

    @property
    def board(self) -> Board:
        """Current projection, loaded on first access."""
        if self._board is None:
            return self.load()
        return self._board

    def load(self) -> Board:
        """Refetch the owner's live entries and rebuild the projection."""
        entries = self.store.list_by_owner(self.owner_id, include_archived=False)
        self._board = group_by_status(entries)
        logger.debug("Loaded board for %s with %d entries", self.owner_id, len(entries))
        return self._board

    def resolve_drop_target(self, drop_target_id) -> Tuple[ApplicationStatus, int]:
        """
        Resolve a drop target to a (stage, insertion index) pair.

        A stage value targets the end of that stage. An entry id targets
        the slot that entry currently occupies.

        Raises:
            NotFoundError: If the target entry is not on the board
            InvalidTargetError: If the target is neither a stage nor an entry id
        """
        if isinstance(drop_target_id, ApplicationStatus) or (
            isinstance(drop_target_id, str) and not drop_target_id.strip().isdigit()
        ):
            stage = parse_status(drop_target_id)
            return stage, len(self.board[stage])

        target_id = _as_entry_id(drop_target_id)
        for stage, entries in self.board.items():
            for index, entry in enumerate(entries):
                if entry["id"] == target_id:
                    return stage, index
        raise create_not_found_error(target_id)

    def move(self, moving_id, drop_target_id) -> MoveOutcome:
        """
        Move an entry onto a stage or onto another entry.

        Dropping an entry onto itself is a no-op and touches nothing.
        """
        if moving_id == drop_target_id:
            logger.debug("Entry %s dropped onto itself; nothing to do", moving_id)
            return MoveOutcome(moved=False)

        stage, index = self.resolve_drop_target(drop_target_id)
        return self.move_to(moving_id, stage, index)

    def move_to(self, moving_id, target_status, target_index=END_OF_STAGE) -> MoveOutcome:
        """
        Move an entry to a known stage and index, persisting the result.

        The update set is computed against the current projection. An empty
        set is a no-op with no store call. Otherwise the whole set is
        written as one batch and the projection is refetched. On failure the
        projection is left untouched and the error propagates.

        Raises:
            NotFoundError: If moving_id is not on the board
            InvalidTargetError: If target_status is not a known stage
            ValidationError: If target_index is malformed
            PersistenceError: If the batch write fails
        """
        moving_id = validate_entry_id(moving_id)
        board = self.board
        updates = compute_move(
            build_partitions(board),
            moving_id,
            target_status,
            target_index,
            current_positions=positions_of(board),
        )
        if not updates:
            logger.debug("Move of entry %s leaves the board unchanged", moving_id)
            return MoveOutcome(moved=False)

        self.store.batch_update_positions(self.owner_id, updates)
        logger.debug("Persisted %d position updates for entry %s", len(updates), moving_id)
        self.load()
        return MoveOutcome(moved=True, updates=updates)


def _as_entry_id(value) -> int:
    if isinstance(value, bool):
        raise create_invalid_target_error(f"Invalid drop target: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise create_invalid_target_error(f"Invalid drop target: {value!r}")
