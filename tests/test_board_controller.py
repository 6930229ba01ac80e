"""
Tests for the BoardController.

Covers board projection loading, drop target resolution, persisted moves,
no-op detection and error propagation.
"""

import os
import tempfile
from unittest.mock import MagicMock

import pytest

from jobboard.db.entry_store import EntryStore
from jobboard.models.errors import (
    InvalidTargetError,
    NotFoundError,
    PersistenceError,
    create_db_error,
)
from jobboard.models.status import ApplicationStatus, board_stages
from jobboard.services.board_controller import BoardController, MoveOutcome, board_to_dict
from jobboard.utils.ordering import END_OF_STAGE

APPLIED = ApplicationStatus.APPLIED
INTERVIEWING = ApplicationStatus.INTERVIEWING


@pytest.fixture
def store():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield EntryStore(path)

    try:
        os.unlink(path)
    except OSError:
        pass


def add(store, company, status=None, owner="alice"):
    attrs = {"company_name": company, "title": "Engineer", "applied_date": "2025-01-01"}
    return store.create(owner, attrs, status=status)["id"]


def ids_in(controller, stage):
    return [entry["id"] for entry in controller.board[stage]]


def fake_store(entries):
    mock = MagicMock()
    mock.list_by_owner.return_value = entries
    return mock


class TestLoad:
    def test_groups_by_stage_in_column_order(self, store):
        x = add(store, "X")
        y = add(store, "Y", status="offering")
        add(store, "Other", owner="bob")

        controller = BoardController(store, "alice")
        board = controller.load()

        assert list(board) == board_stages()
        assert ids_in(controller, APPLIED) == [x]
        assert ids_in(controller, ApplicationStatus.OFFERING) == [y]
        assert sum(len(entries) for entries in board.values()) == 2

    def test_archived_entries_hidden(self, store):
        x = add(store, "X")
        y = add(store, "Y")
        store.set_archived("alice", x, True)

        assert ids_in(BoardController(store, "alice"), APPLIED) == [y]

    def test_board_loaded_lazily(self):
        mock = fake_store([])
        controller = BoardController(mock, "alice")
        mock.list_by_owner.assert_not_called()

        controller.board
        controller.board
        mock.list_by_owner.assert_called_once_with("alice", include_archived=False)

    def test_board_to_dict_uses_stage_values(self, store):
        add(store, "X")
        result = board_to_dict(BoardController(store, "alice").load())
        assert list(result) == [stage.value for stage in board_stages()]
        assert result["applied"][0]["company_name"] == "X"


class TestResolveDropTarget:
    def test_stage_targets_its_end(self, store):
        add(store, "X")
        add(store, "Y")
        controller = BoardController(store, "alice")

        assert controller.resolve_drop_target("applied") == (APPLIED, 2)
        assert controller.resolve_drop_target(INTERVIEWING) == (INTERVIEWING, 0)

    def test_entry_targets_its_slot(self, store):
        add(store, "X")
        y = add(store, "Y")
        controller = BoardController(store, "alice")

        assert controller.resolve_drop_target(y) == (APPLIED, 1)
        assert controller.resolve_drop_target(str(y)) == (APPLIED, 1)

    def test_unknown_entry(self, store):
        with pytest.raises(NotFoundError):
            BoardController(store, "alice").resolve_drop_target(999)

    def test_unknown_stage(self, store):
        with pytest.raises(InvalidTargetError):
            BoardController(store, "alice").resolve_drop_target("ghosted")

    def test_unsupported_type(self, store):
        with pytest.raises(InvalidTargetError):
            BoardController(store, "alice").resolve_drop_target(1.5)


class TestMove:
    def test_reorder_within_stage(self, store):
        x = add(store, "X")
        y = add(store, "Y")
        z = add(store, "Z")
        controller = BoardController(store, "alice")

        outcome = controller.move_to(y, "applied", 0)

        assert outcome.moved is True
        assert ids_in(controller, APPLIED) == [y, x, z]
        assert [store.get("alice", i)["position"] for i in (y, x, z)] == [1, 2, 3]

    def test_cross_stage_move_to_empty_stage(self, store):
        x = add(store, "X")
        y = add(store, "Y")
        controller = BoardController(store, "alice")

        outcome = controller.move(x, "interviewing")

        assert outcome.to_dict() == {
            "moved": True,
            "updates": [
                {"id": y, "position": 1},
                {"id": x, "position": 1, "status": "interviewing"},
            ],
        }
        assert ids_in(controller, APPLIED) == [y]
        assert ids_in(controller, INTERVIEWING) == [x]
        assert store.get("alice", x)["status"] == "interviewing"

    def test_drop_onto_entry_in_other_stage(self, store):
        x = add(store, "X")
        a = add(store, "A", status="interviewing")
        b = add(store, "B", status="interviewing")
        controller = BoardController(store, "alice")

        controller.move(x, b)

        assert ids_in(controller, INTERVIEWING) == [a, x, b]

    def test_move_closes_gaps(self, store):
        x = add(store, "X")
        y = add(store, "Y")
        z = add(store, "Z")
        store.delete("alice", y)
        controller = BoardController(store, "alice")

        controller.move_to(z, "applied", 0)

        assert store.get("alice", z)["position"] == 1
        assert store.get("alice", x)["position"] == 2

    def test_move_to_end_default(self, store):
        x = add(store, "X")
        y = add(store, "Y")
        controller = BoardController(store, "alice")

        controller.move_to(x, "applied")
        assert ids_in(controller, APPLIED) == [y, x]

    def test_projection_refetched_after_move(self, store):
        x = add(store, "X")
        add(store, "Y")
        controller = BoardController(store, "alice")
        before = controller.board

        controller.move_to(x, "rejected", END_OF_STAGE)

        assert controller.board is not before
        assert ids_in(controller, ApplicationStatus.REJECTED) == [x]


class TestNoOps:
    def test_drop_onto_itself_makes_no_store_call(self):
        mock = fake_store([{"id": 1, "status": "applied", "position": 1}])
        controller = BoardController(mock, "alice")

        outcome = controller.move(1, 1)

        assert outcome.moved is False
        assert outcome.updates == []
        mock.list_by_owner.assert_not_called()
        mock.batch_update_positions.assert_not_called()

    def test_unchanged_order_is_not_persisted(self):
        mock = fake_store(
            [
                {"id": 1, "status": "applied", "position": 1},
                {"id": 2, "status": "applied", "position": 2},
            ]
        )
        controller = BoardController(mock, "alice")

        outcome = controller.move_to(2, "applied", END_OF_STAGE)

        assert outcome.moved is False
        mock.batch_update_positions.assert_not_called()

    def test_move_outcome_repr(self):
        assert "moved=False" in repr(MoveOutcome(moved=False))


class TestErrors:
    def test_unknown_target_status(self, store):
        x = add(store, "X")
        with pytest.raises(InvalidTargetError):
            BoardController(store, "alice").move_to(x, "ghosted")

    def test_moving_unknown_entry(self, store):
        add(store, "X")
        with pytest.raises(NotFoundError):
            BoardController(store, "alice").move(404, "interviewing")

    def test_persist_failure_leaves_projection(self):
        entries = [
            {"id": 1, "status": "applied", "position": 1},
            {"id": 2, "status": "applied", "position": 2},
        ]
        mock = fake_store(entries)
        mock.batch_update_positions.side_effect = create_db_error("database is locked", retryable=True)
        controller = BoardController(mock, "alice")
        before = controller.board

        with pytest.raises(PersistenceError):
            controller.move_to(2, "applied", 0)

        assert controller.board is before
        assert [entry["id"] for entry in controller.board[APPLIED]] == [1, 2]
        mock.list_by_owner.assert_called_once()
