"""Per-board session controller.

A ``BoardSession`` is created when a board is opened and discarded when
it is closed. It owns everything scoped to that board: the reactive
state node the UI watches, the drag machine, the optimistic engine and
the sync adapter.

State keys:

- ``board``: the current ``Board`` snapshot
- ``error``: message from the last failed save, or absent
- ``wip``: column id -> ``WipStatus`` for columns over their limit
- ``sync.status``: ``idle``, ``offline`` or ``resync``
"""

from __future__ import annotations

import logging
import uuid

from laneboard.backend import Backend
from laneboard.channel import Channel
from laneboard.drag import DragMachine, DragSession
from laneboard.engine import CommittedMove, OptimisticEngine, touched_columns
from laneboard.errors import LaneboardError
from laneboard.model.board import Board, Column, DropResult, Kind, Move
from laneboard.model.column import add_column, remove_column, set_wip_limit
from laneboard.model.node import Node
from laneboard.sync import COLUMN_CREATED, COLUMN_DELETED, COLUMN_UPDATED, SyncAdapter
from laneboard.wip import record_wip

logger = logging.getLogger(__name__)


class BoardSession:
    """Everything one client needs to view and edit one board."""

    def __init__(
        self,
        board_id: str,
        backend: Backend,
        channel: Channel,
        client_id: str | None = None,
        resync_on_reconnect: bool = True,
    ) -> None:
        self.board_id = board_id
        self.backend = backend
        self.channel = channel
        self.client_id = client_id or uuid.uuid4().hex[:8]
        self.loaded = False

        self.state = Node(wip={}, sync={"status": "idle"})
        self.drag = DragMachine()
        self.sync = SyncAdapter(
            channel,
            self.state,
            board_id,
            self.client_id,
            resync=self.resync,
            resync_on_reconnect=resync_on_reconnect,
        )
        self.engine = OptimisticEngine(self.state, backend, self.sync)
        self.sync.on_remote_move(self._on_remote_move)

    @property
    def board(self) -> Board:
        return self.state.board

    # --- Lifecycle ---

    async def open(self) -> BoardSession:
        """Load the board and join its room. Opening twice is a no-op."""
        if self.loaded:
            return self
        board = await self.backend.fetch_board(self.board_id)
        self.state.board = board
        record_wip(self.state, board)
        await self.sync.join()
        self.loaded = True
        logger.debug("opened board %s as %s", self.board_id, self.client_id)
        return self

    async def close(self) -> None:
        """Finish in-flight saves and leave the room."""
        if not self.loaded:
            return
        if self.drag.active:
            self.drag.cancel()
        await self.engine.drain()
        await self.sync.leave()
        self.loaded = False

    async def __aenter__(self) -> BoardSession:
        return await self.open()

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def resync(self) -> None:
        """Replace local state with the backend's copy of the board.

        Saves still in flight are awaited first so the fetched copy
        already contains them.
        """
        await self.engine.drain()
        board = await self.backend.fetch_board(self.board_id)
        while self.engine.pending:
            # Moves made during the fetch may be missing from it.
            await self.engine.drain()
            board = await self.backend.fetch_board(self.board_id)
        self.state.board = board
        record_wip(self.state, board)
        logger.info("resynced board %s", self.board_id)

    # --- Gestures ---

    def drag_start(self, kind: Kind, container_id: str, index: int) -> DragSession:
        self._require_loaded()
        return self.drag.start(kind, container_id, index)

    def drag_update(self, container_id: str, index: int) -> None:
        self.drag.hover(container_id, index)

    def drag_away(self) -> None:
        self.drag.hover_away()

    def drag_cancel(self) -> None:
        self.drag.cancel()

    def drag_end(self) -> CommittedMove | None:
        """Drop the dragged item. Returns None for cancelled or no-op drops."""
        result = self.drag.drop()
        if result is None:
            return None
        return self.engine.apply_move(result)

    # --- Direct moves ---

    def move_task(self, task_id: str, column_id: str, index: int) -> CommittedMove:
        """Move a task as if it had been dragged to column_id at index."""
        self._require_loaded()
        source_id, source_index = self.board.find_task(task_id)
        return self.engine.apply_move(DropResult(Kind.TASK, source_id, source_index, column_id, index))

    def move_column(self, column_id: str, index: int) -> CommittedMove:
        self._require_loaded()
        source_index = self.board.column_index(column_id)
        return self.engine.apply_move(DropResult(Kind.COLUMN, self.board_id, source_index, self.board_id, index))

    async def set_wip_limit(self, column_id: str, limit: int | None) -> bool:
        """Change a column's WIP limit. Returns False if the backend refused."""
        self._require_loaded()
        before = self.board
        self.state.board = set_wip_limit(before, column_id, limit)
        record_wip(self.state, self.board, [column_id])
        try:
            await self.backend.update_column(column_id, {"wip_limit": limit or 0})
        except Exception as exc:
            logger.warning("saving WIP limit of %s failed, reverting: %s", column_id, exc)
            self.state.board = set_wip_limit(self.board, column_id, before.column(column_id).wip_limit)
            record_wip(self.state, self.board, [column_id])
            self.state.error = f"Could not save WIP limit of {column_id}: {exc}"
            return False
        await self.sync.broadcast_column(COLUMN_UPDATED, column_id, patch={"wip_limit": limit or 0})
        return True

    # --- Columns ---

    async def add_column(self, name: str, wip_limit: int = 0, index: int | None = None) -> Column | None:
        """Add an empty column. Returns it, or None if the backend refused.

        Raises ValueError for a negative limit before anything changes.
        """
        self._require_loaded()
        before = self.board
        after = add_column(before, name, wip_limit, index=index)
        column = next(col for col in after.columns if not before.has_column(col.id))
        self.state.board = after
        try:
            await self.backend.create_column(self.board_id, column.id, column.name, column.wip_limit, column.position)
        except Exception as exc:
            logger.warning("saving new column %s failed, reverting: %s", column.id, exc)
            self.state.error = f"Could not save column {column.name}: {exc}"
            try:
                self.state.board = remove_column(self.board, column.id)
            except (ValueError, LaneboardError):
                await self.resync()
            record_wip(self.state, self.board)
            return None
        await self.sync.broadcast_column(
            COLUMN_CREATED, column.id, name=column.name, wipLimit=column.wip_limit, index=column.position
        )
        return column

    async def remove_column(self, column_id: str) -> bool:
        """Remove an empty column. Returns False if the backend refused.

        Raises ValueError if the column still holds tasks.
        """
        self._require_loaded()
        before = self.board
        column = before.column(column_id)
        index = before.column_index(column_id)
        self.state.board = remove_column(before, column_id)
        record_wip(self.state, self.board, [column_id])
        try:
            await self.backend.delete_column(column_id)
        except Exception as exc:
            logger.warning("removing column %s failed, reverting: %s", column_id, exc)
            self.state.error = f"Could not remove column {column.name}: {exc}"
            if not self.board.has_column(column_id):
                self.state.board = add_column(
                    self.board, column.name, column.wip_limit, column_id=column_id, index=index
                )
            return False
        await self.sync.broadcast_column(COLUMN_DELETED, column_id)
        return True

    def dismiss_error(self) -> None:
        self.state.error = None

    def _on_remote_move(self, move: Move) -> None:
        record_wip(self.state, self.board, touched_columns(move))

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise LaneboardError(f"board {self.board_id} is not open")
