"""Real-time sync adapter.

Broadcasts committed moves to the board room and applies moves from
peers to the local board with the same reorder algorithms, so every
client converges on the same order. Conflicting moves are settled by
whichever event is applied last; there are no versions or transforms.

Column lifecycle changes (create, update, delete) travel the same way
once the backend has accepted them.

After a disconnect, missed events are not replayed. The adapter asks
for a full resync instead.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable

from laneboard.backend import update_column_on
from laneboard.channel import CONNECT, DISCONNECT, Channel
from laneboard.errors import ChannelError, InvalidMoveError, PersistenceError
from laneboard.model.board import Board, Kind, Move
from laneboard.model.column import add_column, remove_column
from laneboard.model.node import Node
from laneboard.model.reorder import apply_move, locate_move
from laneboard.wip import record_wip

logger = logging.getLogger(__name__)

TASK_MOVED = "task:moved"
COLUMNS_REORDERED = "columns:reordered"
COLUMN_CREATED = "column:created"
COLUMN_UPDATED = "column:updated"
COLUMN_DELETED = "column:deleted"

EVENTS = {Kind.TASK: TASK_MOVED, Kind.COLUMN: COLUMNS_REORDERED}
COLUMN_EVENTS = (COLUMN_CREATED, COLUMN_UPDATED, COLUMN_DELETED)

MoveHandler = Callable[[Move], None]


def move_to_payload(move: Move, board_id: str, origin: str) -> dict[str, Any]:
    """Wire form of a move."""
    payload: dict[str, Any] = {
        "entity": move.kind.value,
        "id": move.id,
        "destIndex": move.dest_index,
        "boardId": board_id,
        "origin": origin,
    }
    if move.kind is Kind.TASK:
        payload["destContainerId"] = move.dest_container_id
    return payload


def apply_column_event(board: Board, event: str, payload: dict[str, Any]) -> Board:
    """Apply a column:* event to a board.

    Creating a column that exists or deleting one that is gone returns
    the board unchanged, so replays are harmless.
    """
    column_id = str(payload["id"])
    if event == COLUMN_CREATED:
        if board.has_column(column_id):
            return board
        index = payload.get("index")
        return add_column(
            board,
            str(payload["name"]),
            int(payload.get("wipLimit") or 0),
            column_id=column_id,
            index=None if index is None else int(index),
        )
    if event == COLUMN_UPDATED:
        after = update_column_on(board, column_id, payload["patch"])
        return board if after == board else after
    if event == COLUMN_DELETED:
        if not board.has_column(column_id):
            return board
        return remove_column(board, column_id)
    raise ValueError(f"not a column event: {event}")


class SyncAdapter:
    """Keeps one client's board in step with the board room."""

    def __init__(
        self,
        channel: Channel,
        state: Node,
        board_id: str,
        client_id: str,
        resync: Callable[[], Awaitable[Any]] | None = None,
        resync_on_reconnect: bool = True,
    ) -> None:
        self.channel = channel
        self.state = state
        self.board_id = board_id
        self.client_id = client_id
        self.resync = resync
        self.resync_on_reconnect = resync_on_reconnect
        self.pending: set[asyncio.Task] = set()
        self._handlers: list[MoveHandler] = []
        self._offs: list[Callable[[], None]] = []
        self.joined = False

    async def join(self) -> None:
        if self.joined:
            return
        await self.channel.join_board_room(self.board_id)
        self._offs = [
            self.channel.on(TASK_MOVED, self._on_event),
            self.channel.on(COLUMNS_REORDERED, self._on_event),
            self.channel.on(DISCONNECT, self._on_disconnect),
            self.channel.on(CONNECT, self._on_connect),
        ]
        for event in COLUMN_EVENTS:
            self._offs.append(self.channel.on(event, functools.partial(self._on_column_event, event)))
        self.joined = True
        self._set_status("idle" if self.channel.connected else "offline")

    async def leave(self) -> None:
        if not self.joined:
            return
        for off in self._offs:
            off()
        self._offs.clear()
        await self.channel.leave_board_room(self.board_id)
        self.joined = False

    def on_remote_move(self, handler: MoveHandler) -> Callable[[], None]:
        """Call handler with every move applied from a peer."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def broadcast(self, move: Move) -> bool:
        """Send a committed move to peers. Returns False if it was not sent."""
        payload = move_to_payload(move, self.board_id, self.client_id)
        return await self._emit(EVENTS[move.kind], payload, f"move of {move.kind.value} {move.id}")

    async def broadcast_column(self, event: str, column_id: str, **fields: Any) -> bool:
        """Send a saved column change (one of COLUMN_EVENTS) to peers."""
        payload = {"id": column_id, **fields, "boardId": self.board_id, "origin": self.client_id}
        return await self._emit(event, payload, f"{event} {column_id}")

    async def _emit(self, event: str, payload: dict[str, Any], what: str) -> bool:
        if not self.channel.connected:
            logger.warning("offline, not broadcasting %s", what)
            return False
        try:
            await self.channel.emit(event, payload)
        except ChannelError as exc:
            logger.warning("broadcast of %s failed: %s", what, exc)
            return False
        return True

    def apply_remote(self, payload: dict[str, Any]) -> Move | None:
        """Apply a peer's move to the local board.

        Returns the applied move, or None if it was redundant (already
        in place) or could not be located locally.
        """
        board = self.state.board
        try:
            kind = Kind(payload["entity"])
            move = locate_move(
                board,
                kind,
                str(payload["id"]),
                payload.get("destContainerId"),
                int(payload["destIndex"]),
            )
        except (KeyError, ValueError, InvalidMoveError) as exc:
            logger.warning("cannot apply remote move %r: %s", payload, exc)
            self._request_resync()
            return None

        if move.is_noop:
            logger.debug("remote move of %s %s already applied", kind.value, move.id)
            return None

        self.state.board = apply_move(board, move)
        logger.debug("applied remote move of %s %s from %s", kind.value, move.id, payload.get("origin"))
        for handler in list(self._handlers):
            handler(move)
        return move

    def apply_remote_column(self, event: str, payload: dict[str, Any]) -> bool:
        """Apply a peer's column change. Returns False if nothing changed."""
        board = self.state.board
        try:
            after = apply_column_event(board, event, payload)
        except (KeyError, ValueError, PersistenceError) as exc:
            logger.warning("cannot apply remote %s %r: %s", event, payload, exc)
            self._request_resync()
            return False
        if after is board:
            logger.debug("remote %s %s already applied", event, payload.get("id"))
            return False
        self.state.board = after
        record_wip(self.state, after)
        logger.debug("applied remote %s %s from %s", event, payload.get("id"), payload.get("origin"))
        return True

    def _from_peer(self, payload: dict[str, Any]) -> bool:
        return payload.get("boardId") == self.board_id and payload.get("origin") != self.client_id

    def _on_event(self, payload: dict[str, Any]) -> None:
        if self._from_peer(payload):
            self.apply_remote(payload)

    def _on_column_event(self, event: str, payload: dict[str, Any]) -> None:
        if self._from_peer(payload):
            self.apply_remote_column(event, payload)

    def _on_disconnect(self, payload: dict[str, Any]) -> None:
        logger.warning("channel disconnected: %s", payload.get("reason", "unknown"))
        self._set_status("offline")

    def _on_connect(self, payload: dict[str, Any]):
        if not self.resync_on_reconnect:
            self._set_status("idle")
            return None
        logger.info("channel reconnected, resyncing board %s", self.board_id)
        return self._run_resync()

    def _request_resync(self) -> None:
        if self.resync is None:
            return
        task = asyncio.ensure_future(self._run_resync())
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)

    async def _run_resync(self) -> None:
        if self.resync is None:
            self._set_status("idle")
            return
        self._set_status("resync")
        try:
            await self.resync()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("resync of board %s failed", self.board_id)
        finally:
            self._set_status("idle" if self.channel.connected else "offline")

    def _set_status(self, status: str) -> None:
        if self.state.sync is None:
            self.state.sync = {"status": status}
        else:
            self.state.sync.status = status
