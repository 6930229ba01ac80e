"""
Ordering engine for the job board.

Pure functions that compute position assignments for entries within stage
partitions. Nothing here touches persistence: given the same input the
output is always the same, so the engine can be exercised without a
database.

A partition is the ordered list of entry ids sharing one stage (ascending
position). Positions are 1-based and dense after any reorder.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from jobboard.models.errors import create_invalid_target_error, create_not_found_error
from jobboard.models.status import ApplicationStatus, board_stages, parse_status
from jobboard.schemas.entry import PositionUpdate
from jobboard.utils.validation import validate_target_index

# Sentinel accepted as target_index for "drop at the end of the stage"
END_OF_STAGE = "end"

Partitions = Dict[ApplicationStatus, List[int]]


def group_by_status(entries: Iterable[Mapping[str, Any]]) -> Dict[ApplicationStatus, List[Dict[str, Any]]]:
    """
    Group entries into stage lists sorted by position.

    Every stage is present in the result, in board-column order, even when
    it has no entries. Ties on position (possible after unarchiving) are
    broken by id so the order is deterministic.

    Args:
        entries: Entry records with at least id, status and position

    Returns:
        Mapping of stage -> entries sorted by (position, id)
    """
    grouped: Dict[ApplicationStatus, List[Dict[str, Any]]] = {
        stage: [] for stage in board_stages()
    }
    for entry in entries:
        grouped[parse_status(entry["status"])].append(dict(entry))

    for stage_entries in grouped.values():
        stage_entries.sort(key=lambda e: (e["position"], e["id"]))

    return grouped


def build_partitions(board: Mapping[ApplicationStatus, Sequence[Mapping[str, Any]]]) -> Partitions:
    """Reduce a grouped board to stage -> ordered entry ids."""
    return {stage: [entry["id"] for entry in entries] for stage, entries in board.items()}


def positions_of(board: Mapping[ApplicationStatus, Sequence[Mapping[str, Any]]]) -> Dict[int, int]:
    """Map every entry id on a grouped board to its stored position."""
    return {
        entry["id"]: entry["position"]
        for entries in board.values()
        for entry in entries
    }


def _normalize_partitions(partitions: Mapping[Any, Sequence[int]]) -> Partitions:
    return {parse_status(stage): list(ids) for stage, ids in partitions.items()}


def _locate(partitions: Partitions, entry_id: int) -> ApplicationStatus:
    for stage, ids in partitions.items():
        if entry_id in ids:
            return stage
    raise create_not_found_error(entry_id)


def _clamp(index: Optional[int], upper: int) -> int:
    if index is None:
        return upper
    return max(0, min(index, upper))


def _renumber(
    ordered_ids: Sequence[int],
    current_positions: Mapping[int, int],
    original_ids: Sequence[int],
) -> List[PositionUpdate]:
    """Assign 1..n in list order, keeping only entries whose position changes."""
    previous = {
        entry_id: current_positions.get(entry_id, index + 1)
        for index, entry_id in enumerate(original_ids)
    }
    updates = []
    for index, entry_id in enumerate(ordered_ids):
        position = index + 1
        if previous.get(entry_id) != position:
            updates.append(PositionUpdate(id=entry_id, position=position))
    return updates


def compute_move(
    partitions: Mapping[Any, Sequence[int]],
    moving_id: int,
    target_status,
    target_index=END_OF_STAGE,
    current_positions: Optional[Mapping[int, int]] = None,
) -> List[PositionUpdate]:
    """
    Compute the position/status updates for moving one entry.

    Same-stage reorder: the entry is removed from its slot and reinserted at
    target_index clamped to [0, len-1]; the partition is renumbered 1..n.
    If the resulting order equals the current order the result is empty.

    Cross-stage move: the source partition is renumbered 1..n without the
    entry, the entry is inserted into the target partition at target_index
    clamped to [0, len], and the target partition is renumbered 1..n. The
    moved entry's update always carries its new status.

    Only entries whose position (or status) changes are returned, source
    partition first, each partition in list order.

    Args:
        partitions: Stage (enum or value) -> entry ids ordered by position
        moving_id: Id of the entry being moved
        target_status: Destination stage (enum or value)
        target_index: Zero-based insertion index; END_OF_STAGE or None for
            the end of the target stage. Negative values clamp to 0.
        current_positions: Optional id -> stored position. When given,
            changes are judged against the stored values so a reorder also
            closes gaps left by archive/delete. Defaults to dense positions.

    Returns:
        List of PositionUpdate, empty for a no-op

    Raises:
        InvalidTargetError: If target_status is unknown or not on the board
        NotFoundError: If moving_id is not in any partition
        ValidationError: If target_index is neither an integer nor END_OF_STAGE

    Examples:
        >>> compute_move({"applied": [1, 2, 3]}, 2, "applied", 0)
        [PositionUpdate(id=2, position=1, status=None), PositionUpdate(id=1, position=2, status=None)]
        >>> compute_move({"applied": [1, 2, 3]}, 2, "applied", 1)
        []
    """
    normalized = _normalize_partitions(partitions)
    target = parse_status(target_status)
    if target not in normalized:
        raise create_invalid_target_error(f"Stage '{target.value}' is not part of the board")

    index = None if target_index == END_OF_STAGE else validate_target_index(target_index)
    source = _locate(normalized, moving_id)
    positions = current_positions or {}

    if source == target:
        original = normalized[source]
        reordered = [entry_id for entry_id in original if entry_id != moving_id]
        reordered.insert(_clamp(index, len(original) - 1), moving_id)
        if reordered == original:
            return []
        return _renumber(reordered, positions, original)

    source_before = normalized[source]
    source_after = [entry_id for entry_id in source_before if entry_id != moving_id]

    target_before = normalized[target]
    target_after = list(target_before)
    target_after.insert(_clamp(index, len(target_before)), moving_id)

    updates = _renumber(source_after, positions, source_before)

    target_previous = {
        entry_id: positions.get(entry_id, index + 1)
        for index, entry_id in enumerate(target_before)
    }
    for index, entry_id in enumerate(target_after):
        position = index + 1
        if entry_id == moving_id:
            updates.append(PositionUpdate(id=entry_id, position=position, status=target))
        elif target_previous[entry_id] != position:
            updates.append(PositionUpdate(id=entry_id, position=position))

    return updates


def apply_updates(partitions: Mapping[Any, Sequence[int]], updates: Iterable[PositionUpdate]) -> Partitions:
    """
    Apply a set of updates to partitions and return the resulting order.

    Entries without an update keep their stage and their dense position.
    Useful for previewing the board a move would produce.

    Args:
        partitions: Stage -> entry ids ordered by position
        updates: Updates as returned by compute_move

    Returns:
        Stage -> entry ids ordered by their new positions
    """
    normalized = _normalize_partitions(partitions)
    placement = {}
    for stage, ids in normalized.items():
        for index, entry_id in enumerate(ids):
            placement[entry_id] = (stage, index + 1)

    for update in updates:
        stage, _ = placement[update.id]
        placement[update.id] = (update.status or stage, update.position)

    result: Partitions = {stage: [] for stage in normalized}
    for entry_id, (stage, position) in sorted(placement.items(), key=lambda item: (item[1][1], item[0])):
        result.setdefault(stage, []).append(entry_id)
    return result
