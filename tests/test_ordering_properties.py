"""
Property-based tests for the ordering engine.

Tests universal properties that should hold for every board and every move.
"""

from hypothesis import given, strategies as st

from jobboard.models.status import ApplicationStatus, board_stages
from jobboard.utils.ordering import END_OF_STAGE, apply_updates, compute_move


@st.composite
def boards_with_move(draw):
    """Generate partitions with unique ids plus a (moving_id, target, index) move."""
    stages = board_stages()
    total = draw(st.integers(min_value=1, max_value=12))
    ids = list(range(1, total + 1))
    assignment = draw(st.lists(st.sampled_from(stages), min_size=total, max_size=total))

    partitions = {stage: [] for stage in stages}
    for entry_id, stage in zip(ids, assignment):
        partitions[stage].append(entry_id)

    moving_id = draw(st.sampled_from(ids))
    target = draw(st.sampled_from(stages))
    index = draw(st.one_of(st.integers(min_value=-3, max_value=15), st.just(END_OF_STAGE)))
    return partitions, moving_id, target, index


def _stored_positions(partitions):
    return {
        entry_id: index + 1
        for ids in partitions.values()
        for index, entry_id in enumerate(ids)
    }


def _dense_after(partitions, updates):
    """Full id -> (stage, position) after applying updates to dense partitions."""
    placement = {}
    for stage, ids in partitions.items():
        for index, entry_id in enumerate(ids):
            placement[entry_id] = (stage, index + 1)
    for update in updates:
        stage, _ = placement[update.id]
        placement[update.id] = (update.status or stage, update.position)
    return placement


class TestMoveProperties:
    """Property tests for compute_move."""

    @given(boards_with_move())
    def test_every_partition_stays_dense(self, case):
        """
        **Property: positions stay dense**

        After applying the updates, each stage holds positions exactly 1..n
        with no duplicates.
        """
        partitions, moving_id, target, index = case
        updates = compute_move(partitions, moving_id, target, index)
        placement = _dense_after(partitions, updates)

        by_stage = {stage: [] for stage in board_stages()}
        for stage, position in placement.values():
            by_stage[stage].append(position)
        for positions in by_stage.values():
            assert sorted(positions) == list(range(1, len(positions) + 1))

    @given(boards_with_move())
    def test_moved_entry_lands_in_target_stage(self, case):
        partitions, moving_id, target, index = case
        updates = compute_move(partitions, moving_id, target, index)
        result = apply_updates(partitions, updates)

        assert moving_id in result[ApplicationStatus(target)]
        assert sum(len(ids) for ids in result.values()) == sum(len(ids) for ids in partitions.values())

    @given(boards_with_move())
    def test_repeating_a_move_is_a_noop(self, case):
        """
        **Property: idempotence**

        Replaying the same move against the board it produced yields no
        further updates.
        """
        partitions, moving_id, target, index = case
        first = compute_move(partitions, moving_id, target, index)
        after = apply_updates(partitions, first)

        assert compute_move(after, moving_id, target, index) == []

    @given(boards_with_move())
    def test_compute_move_is_deterministic(self, case):
        partitions, moving_id, target, index = case
        assert compute_move(partitions, moving_id, target, index) == compute_move(
            partitions, moving_id, target, index
        )

    @given(boards_with_move())
    def test_only_changed_entries_are_reported(self, case):
        """Every reported update differs from the entry's current placement."""
        partitions, moving_id, target, index = case
        updates = compute_move(
            partitions, moving_id, target, index, current_positions=_stored_positions(partitions)
        )
        before = _dense_after(partitions, [])

        for update in updates:
            stage, position = before[update.id]
            assert update.status is not None or update.position != position
            if update.status is not None:
                assert update.id == moving_id

    @given(boards_with_move())
    def test_relative_order_of_other_entries_preserved(self, case):
        """
        **Property: relative order preservation**

        Entries other than the moved one keep their relative order in
        every stage.
        """
        partitions, moving_id, target, index = case
        updates = compute_move(partitions, moving_id, target, index)
        result = apply_updates(partitions, updates)

        for stage in board_stages():
            before = [i for i in partitions[stage] if i != moving_id]
            after = [i for i in result[stage] if i != moving_id]
            assert before == after
