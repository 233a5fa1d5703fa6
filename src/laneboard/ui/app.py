"""Main Textual application for laneboard."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from laneboard.backend import Backend
from laneboard.channel import LocalHub
from laneboard.config import read_config
from laneboard.git import GitBackend, has_branch, init_repo, is_git_repo, write_board
from laneboard.model.column import new_board
from laneboard.session import BoardSession
from laneboard.ui.board import BoardScreen

logger = logging.getLogger(__name__)


class ConfirmInitScreen(ModalScreen[bool]):
    """Modal screen asking to initialize a git repo."""

    CSS = """
    ConfirmInitScreen {
        align: center middle;
    }
    #dialog {
        width: 70;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    #message {
        text-align: center;
        margin-bottom: 1;
    }
    #buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }
    Button {
        margin: 0 2;
    }
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = path

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(f"{self.path} is not a git repository. Create one with a new board?", id="message")
            with Horizontal(id="buttons"):
                yield Button("Yes", id="yes", variant="primary")
                yield Button("No", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")


class LaneboardApp(App):
    """Kanban board TUI.

    Opens the board stored in ``repo_path``. Tests and embedders can pass
    a ready ``backend`` and ``board_id`` instead, and a shared ``hub`` to
    put several apps in one room.
    """

    TITLE = "laneboard"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        repo_path: Path | None = None,
        backend: Backend | None = None,
        board_id: str | None = None,
        hub: LocalHub | None = None,
        client_id: str | None = None,
    ):
        super().__init__()
        self.repo_path = repo_path
        self.backend = backend
        self.board_id = board_id
        self.hub = hub or LocalHub()
        self.client_id = client_id
        self.session: BoardSession | None = None

    async def on_mount(self) -> None:
        if self.backend is not None:
            await self._open_session()
        elif not is_git_repo(self.repo_path):
            self.push_screen(ConfirmInitScreen(self.repo_path), self._on_init_response)
        else:
            await self._load_board()

    async def _on_init_response(self, result: bool) -> None:
        if result:
            init_repo(self.repo_path)
            await self._load_board()
        else:
            self.exit()

    async def _load_board(self) -> None:
        """Load or create the board in the repository and show it."""
        config = read_config(self.repo_path)
        if not has_branch(self.repo_path, config.branch):
            board = new_board(self.repo_path.name)
            write_board(self.repo_path, board, "Initialize laneboard board", config.branch)

        self.backend = GitBackend(self.repo_path, config.branch)
        self.board_id = self.backend.load().id
        self.client_id = self.client_id or config.client_id or None
        await self._open_session(resync_on_reconnect=config.resync_on_reconnect)

    async def _open_session(self, resync_on_reconnect: bool = True) -> None:
        self.session = BoardSession(
            self.board_id,
            self.backend,
            self.hub.channel(),
            client_id=self.client_id,
            resync_on_reconnect=resync_on_reconnect,
        )
        await self.session.open()
        self.push_screen(BoardScreen(self.session))

    async def action_quit(self) -> None:
        """Wait for in-flight saves, leave the room and quit."""
        if self.session is not None:
            await self.session.close()
        self.exit()
