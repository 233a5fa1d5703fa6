"""Board screen showing columns of draggable task cards."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Rule, Static

from laneboard.model.board import Column, Kind, Task
from laneboard.session import BoardSession
from laneboard.ui.drag import DraggableMixin, DropTarget
from laneboard.ui.status import ErrorLabel, SyncLabel, WipBanner
from laneboard.ui.watcher import NodeWatcherMixin
from laneboard.wip import check_limit

logger = logging.getLogger(__name__)


def column_title(column: Column) -> str:
    """Column header: name, task count and limit if one is set."""
    status = check_limit(column)
    count = f"{status.count}/{status.limit}" if status.limit else str(status.count)
    return f"{column.name or column.id} ({count})"


class TaskCard(DraggableMixin, Static, can_focus=True):
    """A single task in a column."""

    BINDINGS = [
        Binding("shift+up", "nudge(0, -1)", "Move up", show=False),
        Binding("shift+down", "nudge(0, 1)", "Move down", show=False),
        Binding("shift+left", "nudge(-1, 0)", "Move left", show=False),
        Binding("shift+right", "nudge(1, 0)", "Move right", show=False),
    ]

    DEFAULT_CSS = """
    TaskCard {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    TaskCard:focus {
        background: $primary;
    }
    TaskCard.dragging {
        border: dashed $accent;
        opacity: 0.7;
    }
    """

    def __init__(self, session: BoardSession, task: Task) -> None:
        super().__init__(Text(task.title or task.id))
        self._init_draggable()
        self.session = session
        self.task_id = task.id

    def drag_origin(self) -> tuple[Kind, str, int]:
        column_id, index = self.session.board.find_task(self.task_id)
        return Kind.TASK, column_id, index

    def draggable_clicked(self) -> None:
        self.focus()

    def action_nudge(self, columns: int, rows: int) -> None:
        self.screen.nudge_task(self.task_id, columns, rows)


class ColumnWidget(DraggableMixin, DropTarget, Vertical):
    """A single column. Dragging its header moves the column; cards drop into it."""

    DEFAULT_CSS = """
    ColumnWidget {
        width: 1fr;
        height: 100%;
        min-width: 25;
        max-width: 30;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    ColumnWidget.dragging {
        border: solid $primary;
        opacity: 0.8;
    }
    ColumnWidget.drop-target {
        background: $boost;
    }
    ColumnWidget.over-limit .column-title {
        color: $warning;
    }
    ColumnWidget .column-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }
    ColumnWidget > Rule.-horizontal {
        margin: 0;
    }
    """

    HORIZONTAL_ONLY = True

    def __init__(self, session: BoardSession, column: Column) -> None:
        Vertical.__init__(self)
        self._init_draggable()
        self.session = session
        self.column_id = column.id
        self.set_class(check_limit(column).exceeded, "over-limit")

    def compose(self) -> ComposeResult:
        board = self.session.board
        yield Static(Text(column_title(board.column(self.column_id))), classes="column-title")
        yield Rule()
        for task in board.tasks_in(self.column_id):
            yield TaskCard(self.session, task)

    # -- DraggableMixin: column being dragged --

    def drag_origin(self) -> tuple[Kind, str, int]:
        board = self.session.board
        return Kind.COLUMN, board.id, board.column_index(self.column_id)

    # -- DropTarget: column accepting task drops --

    def accepts(self, draggable) -> bool:
        return isinstance(draggable, TaskCard)

    def drop_slot(self, draggable, x: int, y: int) -> tuple[str, int]:
        index = 0
        for card in self.query(TaskCard):
            if card is draggable:
                continue
            if y < card.region.y + card.region.height / 2:
                break
            index += 1
        return self.column_id, index

    def drag_over(self, draggable) -> None:
        self.add_class("drop-target")

    def drag_away(self, draggable) -> None:
        self.remove_class("drop-target")


class BoardScreen(NodeWatcherMixin, DropTarget, Screen):
    """Main board screen showing all columns."""

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("ctrl+r", "resync", "Reload"),
    ]

    DEFAULT_CSS = """
    #board-header {
        height: 1;
        padding: 0 1;
    }
    #board-title {
        width: 1fr;
        text-style: bold;
    }
    #sync-status {
        width: auto;
    }
    #columns {
        height: 1fr;
    }
    """

    def __init__(self, session: BoardSession):
        self._init_watcher()
        super().__init__()
        self.session = session
        self._active_draggable: DraggableMixin | None = None
        self._stale = False
        self._focus_task_id: str | None = None

    def compose(self) -> ComposeResult:
        board = self.session.board
        with Horizontal(id="board-header"):
            yield Static(Text(board.name or board.id), id="board-title")
            yield SyncLabel(self.session, id="sync-status")
        yield WipBanner(self.session, id="wip-banner")
        yield ErrorLabel(self.session, id="error")
        with Horizontal(id="columns"):
            for column in board.columns:
                yield ColumnWidget(self.session, column)
        yield Footer()

    def on_mount(self) -> None:
        self.node_watch(self.session.state, "board", self._on_board_changed)

    def _on_board_changed(self, node, key, old, new) -> None:
        self.call_later(self.rebuild_columns)

    async def rebuild_columns(self) -> None:
        """Re-render columns from the current board snapshot."""
        if self._active_draggable is not None:
            self._stale = True
            return
        self._stale = False
        container = self.query_one("#columns", Horizontal)
        await container.remove_children()
        await container.mount_all([ColumnWidget(self.session, column) for column in self.session.board.columns])
        if self._focus_task_id is not None:
            for card in self.query(TaskCard):
                if card.task_id == self._focus_task_id:
                    card.focus()
                    break
            self._focus_task_id = None

    # -- Thin delegation: screen routes mouse events to active draggable --

    def on_mouse_move(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable.drag_move(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable.drag_finish(event.screen_x, event.screen_y)
            self._after_drag()

    def action_cancel_drag(self) -> None:
        if self._active_draggable is not None:
            self._active_draggable.drag_cancel()
            self._after_drag()

    def _after_drag(self) -> None:
        if self._stale:
            self.call_later(self.rebuild_columns)

    # -- DropTarget: board accepting column drops --

    def accepts(self, draggable) -> bool:
        return isinstance(draggable, ColumnWidget)

    def drop_slot(self, draggable, x: int, y: int) -> tuple[str, int]:
        index = 0
        for column in self.query(ColumnWidget):
            if column is draggable:
                continue
            if x < column.region.x + column.region.width / 2:
                break
            index += 1
        return self.session.board.id, index

    # -- Keyboard moves --

    def nudge_task(self, task_id: str, columns: int, rows: int) -> None:
        """Move a task to a neighbouring slot, as a drag would."""
        board = self.session.board
        column_id, index = board.find_task(task_id)
        if columns:
            target = board.column_index(column_id) + columns
            if not 0 <= target < len(board.columns):
                return
            dest = board.columns[target]
            dest_index = min(index, len(dest.task_ids))
        else:
            dest = board.column(column_id)
            dest_index = index + rows
            if not 0 <= dest_index < len(dest.task_ids):
                return
        self._focus_task_id = task_id
        self.session.move_task(task_id, dest.id, dest_index)

    async def action_resync(self) -> None:
        await self.session.resync()
