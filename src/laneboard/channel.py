"""Real-time channel interface and an in-process hub.

Channels are scoped to board rooms: a payload emitted with a ``boardId``
reaches every other channel that joined that board's room. Delivery is
asynchronous and FIFO per sender; nothing orders events across senders.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
from typing import Any, Callable, Protocol

from laneboard.errors import ChannelError

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Any]

CONNECT = "connect"
DISCONNECT = "disconnect"


def room_name(board_id: str) -> str:
    return f"board:{board_id}"


class Channel(Protocol):
    @property
    def connected(self) -> bool: ...

    async def join_board_room(self, board_id: str) -> None: ...

    async def leave_board_room(self, board_id: str) -> None: ...

    async def emit(self, event: str, payload: dict[str, Any]) -> None: ...

    def on(self, event: str, handler: Handler) -> Callable[[], None]: ...


class LocalHub:
    """Routes events between LocalChannels in the same process."""

    def __init__(self) -> None:
        self._rooms: dict[str, list[LocalChannel]] = {}
        self._names = itertools.count(1)

    def channel(self, name: str | None = None) -> LocalChannel:
        return LocalChannel(self, name or f"client-{next(self._names)}")

    def members(self, board_id: str) -> list[LocalChannel]:
        return list(self._rooms.get(room_name(board_id), ()))

    def _join(self, channel: LocalChannel, room: str) -> None:
        members = self._rooms.setdefault(room, [])
        if channel not in members:
            members.append(channel)

    def _leave(self, channel: LocalChannel, room: str) -> None:
        members = self._rooms.get(room, [])
        if channel in members:
            members.remove(channel)
        if not members:
            self._rooms.pop(room, None)

    def _route(self, sender: LocalChannel, room: str, event: str, payload: dict[str, Any]) -> None:
        loop = asyncio.get_running_loop()
        for member in self._rooms.get(room, ()):
            if member is sender:
                continue
            loop.call_soon(member._receive, event, dict(payload))


class LocalChannel:
    """One client's connection to a LocalHub."""

    def __init__(self, hub: LocalHub, name: str) -> None:
        self.hub = hub
        self.name = name
        self.rooms: set[str] = set()
        self._connected = True
        self._handlers: dict[str, list[Handler]] = {}
        self.pending: set[asyncio.Future] = set()

    @property
    def connected(self) -> bool:
        return self._connected

    async def join_board_room(self, board_id: str) -> None:
        room = room_name(board_id)
        self.rooms.add(room)
        self.hub._join(self, room)

    async def leave_board_room(self, board_id: str) -> None:
        room = room_name(board_id)
        self.rooms.discard(room)
        self.hub._leave(self, room)

    async def emit(self, event: str, payload: dict[str, Any]) -> None:
        if not self._connected:
            raise ChannelError(f"{self.name} is disconnected")
        board_id = payload.get("boardId")
        room = room_name(str(board_id))
        if board_id is None or room not in self.rooms:
            raise ChannelError(f"{self.name} has not joined a room for board {board_id!r}")
        self.hub._route(self, room, event, payload)

    def on(self, event: str, handler: Handler) -> Callable[[], None]:
        self._handlers.setdefault(event, []).append(handler)

        def off() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return off

    def disconnect(self) -> None:
        """Drop the connection. Events sent to this client meanwhile are lost."""
        if not self._connected:
            return
        self._connected = False
        self._dispatch(DISCONNECT, {"reason": "transport close"})

    def connect(self) -> None:
        if self._connected:
            return
        self._connected = True
        self._dispatch(CONNECT, {})

    def _receive(self, event: str, payload: dict[str, Any]) -> None:
        if not self._connected:
            logger.debug("%s dropped %s while disconnected", self.name, event)
            return
        self._dispatch(event, payload)

    def _dispatch(self, event: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers.get(event, ())):
            try:
                result = handler(payload)
            except Exception:
                logger.exception("%s handler for %s failed", self.name, event)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self.pending.add(task)
                task.add_done_callback(self.pending.discard)

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<LocalChannel {self.name} {state}>"
