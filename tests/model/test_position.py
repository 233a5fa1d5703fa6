"""Tests for position normalization."""

from dataclasses import replace

from laneboard.model.board import Task
from laneboard.model.position import is_normalized, reindex, sort_by_position


def _tasks(*positions):
    return [Task(id=str(i), column_id="c", position=p) for i, p in enumerate(positions)]


def test_reindex_assigns_positions_by_index():
    result = reindex(_tasks(5, 2, 9))
    assert [t.position for t in result] == [0, 1, 2]
    assert [t.id for t in result] == ["0", "1", "2"]


def test_reindex_keeps_items_already_in_place():
    tasks = _tasks(0, 1, 7)
    result = reindex(tasks)
    assert result[0] is tasks[0]
    assert result[1] is tasks[1]
    assert result[2] is not tasks[2]
    assert result[2].position == 2


def test_reindex_does_not_mutate_input():
    tasks = _tasks(3, 4)
    reindex(tasks)
    assert [t.position for t in tasks] == [3, 4]


def test_reindex_empty():
    assert reindex([]) == ()


def test_is_normalized():
    assert is_normalized(_tasks(0, 1, 2))
    assert not is_normalized(_tasks(0, 2))
    assert not is_normalized(_tasks(1, 0))
    assert is_normalized([])


def test_sort_by_position_is_stable_on_ties():
    a, b, c = _tasks(1, 0, 1)
    assert sort_by_position([a, b, c]) == [b, a, c]
    assert sort_by_position([c, b, a]) == [b, c, a]


def test_display_order_round_trips_through_positions():
    tasks = reindex([replace(t, position=0) for t in _tasks(0, 0, 0, 0)])
    shuffled = [tasks[2], tasks[0], tasks[3], tasks[1]]
    assert sort_by_position(shuffled) == list(tasks)
    assert len({t.position for t in tasks}) == len(tasks)
