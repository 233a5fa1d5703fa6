"""Status widgets bound to a board session's state node."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from laneboard.model.board import Board
from laneboard.model.node import Node
from laneboard.session import BoardSession
from laneboard.ui.watcher import NodeWatcherMixin

ICON_WARNING = "⚠"
ICON_SYNC = {"idle": "●", "offline": "○", "resync": "↻"}


def wip_text(board: Board | None, wip: Node | None) -> Text:
    """One warning segment per column over its WIP limit, in board order."""
    text = Text()
    if board is None or wip is None:
        return text
    statuses = wip.to_dict()
    for column in board.columns:
        status = statuses.get(column.id)
        if status is None:
            continue
        if text:
            text.append("  ")
        text.append(f"{ICON_WARNING} ", style="bold")
        text.append(column.name or column.id, style="bold")
        text.append(f" {status.count}/{status.limit}")
    return text


class WipBanner(NodeWatcherMixin, Static):
    """Shows which columns are over their WIP limit. Hidden when none are."""

    DEFAULT_CSS = """
    WipBanner {
        width: 100%;
        height: 1;
        padding: 0 1;
        background: $warning-darken-2;
        color: $text;
        display: none;
    }
    WipBanner.-active {
        display: block;
    }
    """

    def __init__(self, session: BoardSession, **kwargs) -> None:
        self._init_watcher()
        super().__init__("", **kwargs)
        self.session = session

    def on_mount(self) -> None:
        self.node_watch(self.session.state, "wip", self._on_wip_changed)
        self._update_display()

    def _on_wip_changed(self, node, key, old, new) -> None:
        self.call_later(self._update_display)

    def _update_display(self) -> None:
        text = wip_text(self.session.board, self.session.state.wip)
        self.update(text)
        self.set_class(bool(text), "-active")


class ErrorLabel(NodeWatcherMixin, Static):
    """Shows the last failed save. Click to dismiss."""

    DEFAULT_CSS = """
    ErrorLabel {
        width: 100%;
        height: auto;
        padding: 0 1;
        background: $error-darken-2;
        display: none;
    }
    ErrorLabel.-active {
        display: block;
    }
    """

    def __init__(self, session: BoardSession, **kwargs) -> None:
        self._init_watcher()
        super().__init__("", **kwargs)
        self.session = session

    def on_mount(self) -> None:
        self.node_watch(self.session.state, "error", self._on_error_changed)
        self._update_display()

    def _on_error_changed(self, node, key, old, new) -> None:
        self.call_later(self._update_display)

    def _update_display(self) -> None:
        message = self.session.state.error or ""
        self.update(Text(message))
        self.set_class(bool(message), "-active")

    def on_click(self, event) -> None:
        event.stop()
        self.session.dismiss_error()


class SyncLabel(NodeWatcherMixin, Static):
    """Connection indicator: idle, offline or resyncing."""

    def __init__(self, session: BoardSession, **kwargs) -> None:
        self._init_watcher()
        super().__init__("", **kwargs)
        self.session = session

    def on_mount(self) -> None:
        self.node_watch(self.session.state, "sync", self._on_sync_changed)
        self._update_display()

    def _on_sync_changed(self, node, key, old, new) -> None:
        self.call_later(self._update_display)

    def _update_display(self) -> None:
        status = self.session.state.sync.status or "idle"
        self.update(f"{ICON_SYNC.get(status, '?')} {status}")
