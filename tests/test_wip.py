"""Tests for WIP limit checks."""

from laneboard.model.board import Column, Kind, Move
from laneboard.model.node import Node
from laneboard.model.reorder import apply_move
from laneboard.wip import WipStatus, check_columns, check_limit, exceeded_columns, record_wip

from .conftest import make_board


def test_unlimited_column_never_exceeds():
    status = check_limit(Column(id="c", task_ids=("1", "2", "3")))
    assert status == WipStatus(exceeded=False, count=3, limit=0)
    assert status.remaining is None


def test_at_limit_is_not_exceeded():
    status = check_limit(Column(id="c", wip_limit=2, task_ids=("1", "2")))
    assert not status.exceeded
    assert status.remaining == 0


def test_cross_column_move_over_limit_still_succeeds():
    board = make_board({"todo": ["3"], "doing": ["1", "2"]}, wip_limits={"doing": 2})
    after = apply_move(board, Move(Kind.TASK, "3", "todo", 0, "doing", 2))

    assert "3" in after.column("doing").task_ids
    status = check_limit(after.column("doing"))
    assert status == WipStatus(exceeded=True, count=3, limit=2)
    assert status.remaining == -1


def test_check_columns_skips_missing():
    board = make_board({"a": ["1"], "b": []}, wip_limits={"a": 1})
    statuses = check_columns(board, ["a", "gone", "a"])
    assert list(statuses) == ["a"]


def test_exceeded_columns():
    board = make_board({"a": ["1", "2"], "b": ["3", "4"]}, wip_limits={"a": 1, "b": 2})
    assert list(exceeded_columns(board)) == ["a"]


def test_record_wip_full_board():
    state = Node()
    board = make_board({"a": ["1", "2"], "b": []}, wip_limits={"a": 1})
    record_wip(state, board)
    assert list(state.wip.keys()) == ["a"]
    assert state.wip.a.count == 2


def test_record_wip_only_touches_listed_columns():
    state = Node()
    over = make_board({"a": ["1", "2"], "b": ["3", "4"]}, wip_limits={"a": 1, "b": 1})
    record_wip(state, over)

    fixed = make_board({"a": ["1"], "b": ["2"]}, wip_limits={"a": 1, "b": 1})
    record_wip(state, fixed, ["a"])
    assert set(state.wip.keys()) == {"b"}


def test_record_wip_notifies_watchers():
    events = []
    state = Node(wip={})
    state.watch("wip", lambda n, k, old, new: events.append(k))
    record_wip(state, make_board({"a": ["1", "2"]}, wip_limits={"a": 1}))
    assert events == ["wip"]
