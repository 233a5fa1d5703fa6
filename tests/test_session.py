"""Tests for the per-board session controller."""

import pytest

from laneboard.backend import MemoryBackend
from laneboard.engine import CommitStatus
from laneboard.errors import BoardNotFoundError, LaneboardError
from laneboard.model.board import Kind
from laneboard.session import BoardSession

from .conftest import FailingBackend, layout_of, make_board, settle


@pytest.fixture
def session(backend, hub):
    return BoardSession("b1", backend, hub.channel(), client_id="me")


@pytest.mark.asyncio
async def test_open_loads_board_and_joins_room(session, hub, board):
    assert not session.loaded
    await session.open()
    assert session.loaded
    assert session.board == board
    assert hub.members("b1") == [session.channel]
    assert session.state.sync.status == "idle"


@pytest.mark.asyncio
async def test_open_twice_fetches_once(session, backend):
    await session.open()
    await session.open()
    assert backend.calls == [("fetch_board", ("b1",))]


@pytest.mark.asyncio
async def test_open_unknown_board(hub):
    session = BoardSession("nope", MemoryBackend(), hub.channel())
    with pytest.raises(BoardNotFoundError):
        await session.open()
    assert not session.loaded


@pytest.mark.asyncio
async def test_close_leaves_room(session, hub):
    async with session:
        assert session.loaded
    assert not session.loaded
    assert hub.members("b1") == []


@pytest.mark.asyncio
async def test_moves_need_an_open_board(session):
    with pytest.raises(LaneboardError):
        session.move_task("1", "doing", 0)
    with pytest.raises(LaneboardError):
        session.drag_start(Kind.TASK, "todo", 0)


@pytest.mark.asyncio
async def test_open_records_wip(hub):
    board = make_board({"a": ["1", "2"]}, wip_limits={"a": 1})
    session = BoardSession("b1", MemoryBackend(board), hub.channel())
    await session.open()
    assert session.state.wip.a.count == 2


@pytest.mark.asyncio
async def test_drag_gesture_commits_move(session, backend):
    await session.open()
    session.drag_start(Kind.TASK, "todo", 0)
    session.drag_update("doing", 0)
    session.drag_update("done", 0)
    committed = session.drag_end()

    assert layout_of(session.board)["done"] == ["1"]
    await committed.wait()
    assert committed.status is CommitStatus.PERSISTED
    assert layout_of(backend.boards["b1"])["done"] == ["1"]


@pytest.mark.asyncio
async def test_cancelled_drag_changes_nothing(session, backend, board):
    await session.open()
    session.drag_start(Kind.TASK, "todo", 0)
    session.drag_update("doing", 1)
    session.drag_cancel()
    await settle()
    assert session.board is board
    assert [name for name, _ in backend.calls] == ["fetch_board"]


@pytest.mark.asyncio
async def test_drag_away_then_drop_cancels(session, board):
    await session.open()
    session.drag_start(Kind.COLUMN, "b1", 0)
    session.drag_update("b1", 2)
    session.drag_away()
    assert session.drag_end() is None
    assert session.board is board


@pytest.mark.asyncio
async def test_close_cancels_active_drag(session):
    await session.open()
    session.drag_start(Kind.TASK, "todo", 0)
    await session.close()
    assert not session.drag.active


@pytest.mark.asyncio
async def test_close_waits_for_saves(hub, board):
    backend = MemoryBackend(board, latency=0.01)
    session = BoardSession("b1", backend, hub.channel())
    async with session:
        session.move_task("3", "doing", 0)
    assert layout_of(backend.boards["b1"])["doing"] == ["3", "4"]


@pytest.mark.asyncio
async def test_move_over_limit_sets_wip_warning(hub):
    board = make_board({"todo": ["3"], "doing": ["1", "2"]}, wip_limits={"doing": 2})
    session = BoardSession("b1", MemoryBackend(board), hub.channel())
    await session.open()
    assert "doing" not in session.state.wip

    committed = session.move_task("3", "doing", 2)
    assert "3" in session.board.column("doing").task_ids
    assert session.state.wip.doing.exceeded
    await committed.wait()
    assert committed.status is CommitStatus.PERSISTED


@pytest.mark.asyncio
async def test_set_wip_limit(session, backend):
    await session.open()
    assert await session.set_wip_limit("todo", 2)
    assert session.board.column("todo").wip_limit == 2
    assert backend.boards["b1"].column("todo").wip_limit == 2
    assert session.state.wip.todo.count == 3


@pytest.mark.asyncio
async def test_set_wip_limit_reverts_on_failure(hub, board):
    session = BoardSession("b1", FailingBackend(board), hub.channel())
    await session.open()
    assert not await session.set_wip_limit("todo", 1)
    assert session.board.column("todo").wip_limit == 0
    assert "todo" not in session.state.wip
    assert "backend unavailable" in session.state.error

    session.dismiss_error()
    assert session.state.error is None


@pytest.mark.asyncio
async def test_resync_replaces_board(session, backend):
    await session.open()
    changed = make_board({"todo": [], "doing": ["1", "2", "3", "4"], "done": []})
    backend.put(changed)
    await session.resync()
    assert session.board == changed


@pytest.mark.asyncio
async def test_remote_move_updates_wip(hub):
    board = make_board({"todo": ["3"], "doing": ["1"]}, wip_limits={"doing": 1})
    backend = MemoryBackend(board)
    async with BoardSession("b1", backend, hub.channel(), client_id="a") as alice:
        async with BoardSession("b1", backend, hub.channel(), client_id="b") as bob:
            await alice.move_task("3", "doing", 1).wait()
            await settle()
            assert bob.state.wip.doing.count == 2


@pytest.mark.asyncio
async def test_add_column(session, backend):
    await session.open()
    column = await session.add_column("Review", wip_limit=2, index=1)
    assert column.id == "review"
    assert [c.id for c in session.board.columns] == ["todo", "review", "doing", "done"]
    assert backend.boards["b1"] == session.board


@pytest.mark.asyncio
async def test_add_column_reverts_on_failure(hub, board):
    session = BoardSession("b1", FailingBackend(board), hub.channel())
    await session.open()
    assert await session.add_column("Review") is None
    assert session.board == board
    assert "backend unavailable" in session.state.error


@pytest.mark.asyncio
async def test_remove_column(session, backend):
    await session.open()
    assert await session.remove_column("done")
    assert [c.id for c in session.board.columns] == ["todo", "doing"]
    assert [c.id for c in backend.boards["b1"].columns] == ["todo", "doing"]


@pytest.mark.asyncio
async def test_remove_column_with_tasks_is_refused(session, backend, board):
    await session.open()
    with pytest.raises(ValueError):
        await session.remove_column("doing")
    assert session.board is board
    assert [name for name, _ in backend.calls] == ["fetch_board"]


@pytest.mark.asyncio
async def test_remove_column_reverts_on_failure(hub, board):
    session = BoardSession("b1", FailingBackend(board), hub.channel())
    await session.open()
    assert not await session.remove_column("done")
    assert session.board == board
    assert "backend unavailable" in session.state.error
