"""Tests for the WIP banner, error label and sync indicator."""

import pytest

from laneboard.backend import MemoryBackend
from laneboard.model.node import Node
from laneboard.ui.app import LaneboardApp
from laneboard.ui.status import SyncLabel, WipBanner, wip_text
from laneboard.wip import exceeded_columns

from ..conftest import make_board
from .conftest import card


def test_wip_text_lists_exceeded_columns_in_board_order():
    board = make_board({"a": ["1", "2"], "b": ["3"], "c": ["4", "5", "6"]}, wip_limits={"a": 1, "c": 2})
    wip = Node(wip=exceeded_columns(board)).wip
    assert wip_text(board, wip).plain == "⚠ A 2/1  ⚠ C 3/2"


def test_wip_text_empty():
    board = make_board({"a": ["1"]})
    assert wip_text(board, Node(wip={}).wip).plain == ""
    assert wip_text(None, None).plain == ""


@pytest.mark.asyncio
async def test_banner_hidden_under_limit(app):
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        assert not app.screen.query_one(WipBanner).has_class("-active")


@pytest.mark.asyncio
async def test_banner_shows_after_move_over_limit(limited_board):
    app = LaneboardApp(backend=MemoryBackend(limited_board), board_id="b1")
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        banner = app.screen.query_one(WipBanner)
        assert not banner.has_class("-active")

        card(app.screen, "1").focus()
        await pilot.press("shift+right")
        await app.session.engine.drain()
        await pilot.pause()

        assert banner.has_class("-active")
        assert app.session.state.wip.doing.count == 3


@pytest.mark.asyncio
async def test_banner_shown_on_open():
    over = make_board({"todo": ["1", "2", "3"]}, wip_limits={"todo": 1})
    app = LaneboardApp(backend=MemoryBackend(over), board_id="b1")
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        assert app.screen.query_one(WipBanner).has_class("-active")


@pytest.mark.asyncio
async def test_sync_label_follows_connection(app):
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        assert app.screen.query_one(SyncLabel).is_mounted
        app.session.channel.disconnect()
        await pilot.pause()
        assert app.session.state.sync.status == "offline"

        app.session.channel.connect()
        await app.session.engine.drain()
        await pilot.pause()
        await pilot.pause()
        assert app.session.state.sync.status == "idle"
