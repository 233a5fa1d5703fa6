"""Drag session state machine.

Tracks one pointer gesture from pick-up to drop or cancel. Hovering only
updates the session; nothing on the board changes until a drop resolves
into a ``DropResult``.

    IDLE -> DRAGGING -> {DROPPED, CANCELLED} -> IDLE
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from laneboard.errors import DragStateError
from laneboard.model.board import DropResult, Kind

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


@dataclass
class DragSession:
    """The slot a drag started from and the slot it currently hovers."""

    kind: Kind
    source_container_id: str
    source_index: int
    current_container_id: str | None = None
    current_index: int | None = None

    @property
    def has_target(self) -> bool:
        return self.current_container_id is not None and self.current_index is not None


class DragMachine:
    """Owns the single in-progress drag session, if any."""

    def __init__(self) -> None:
        self.state = DragState.IDLE
        self.session: DragSession | None = None
        self.last_outcome: DragState | None = None

    @property
    def active(self) -> bool:
        return self.state is DragState.DRAGGING

    def start(self, kind: Kind, container_id: str, index: int) -> DragSession:
        if self.active:
            raise DragStateError("a drag is already in progress")
        self.session = DragSession(
            kind=Kind(kind),
            source_container_id=container_id,
            source_index=index,
            current_container_id=container_id,
            current_index=index,
        )
        self.state = DragState.DRAGGING
        return self.session

    def hover(self, container_id: str, index: int) -> None:
        """Pointer is over a valid drop slot."""
        session = self._require_session("hover")
        session.current_container_id = container_id
        session.current_index = index

    def hover_away(self) -> None:
        """Pointer left every valid drop target."""
        session = self._require_session("hover_away")
        session.current_container_id = None
        session.current_index = None

    def drop(self) -> DropResult | None:
        """Release the pointer.

        Returns the result to apply, or None if the drop had no target
        or put the item back where it came from.
        """
        session = self._require_session("drop")
        if not session.has_target:
            self.cancel()
            return None

        result = DropResult(
            kind=session.kind,
            source_container_id=session.source_container_id,
            source_index=session.source_index,
            dest_container_id=session.current_container_id,
            dest_index=session.current_index,
        )
        self._finish(DragState.DROPPED)
        if result.is_noop:
            logger.debug("drop at source slot, ignoring")
            return None
        return result

    def cancel(self) -> None:
        self._require_session("cancel")
        self._finish(DragState.CANCELLED)

    def _finish(self, outcome: DragState) -> None:
        self.state = outcome
        self.last_outcome = outcome
        self.session = None
        self.state = DragState.IDLE

    def _require_session(self, action: str) -> DragSession:
        if not self.active or self.session is None:
            raise DragStateError(f"cannot {action}: no drag in progress")
        return self.session
