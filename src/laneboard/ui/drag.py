"""Drag-and-drop plumbing between Textual mouse events and a BoardSession.

Two mixins:
- DraggableMixin: on dragged widgets, turns a press-and-move into a drag
  and feeds pointer positions to the session's drag machine
- DropTarget: on containers, maps a pointer position to a drop slot
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.geometry import Offset

from laneboard.engine import CommittedMove
from laneboard.model.board import Kind

if TYPE_CHECKING:
    from laneboard.session import BoardSession


class DropTarget:
    """Mixin for widgets that can accept drops."""

    def accepts(self, draggable: DraggableMixin) -> bool:
        return False

    def drop_slot(self, draggable: DraggableMixin, x: int, y: int) -> tuple[str, int] | None:
        """The (container id, index) the draggable would land at, or None."""
        return None

    def drag_over(self, draggable: DraggableMixin) -> None:
        """Called when a draggable starts hovering this target."""

    def drag_away(self, draggable: DraggableMixin) -> None:
        """Called when a draggable leaves this target."""


class DraggableMixin:
    """Mixin for widgets that can be dragged.

    Subclasses should:
    - Call _init_draggable() in __init__
    - Provide a ``session`` attribute
    - Implement drag_origin() returning (kind, container id, index)
    - Optionally override draggable_clicked(), DRAG_THRESHOLD and HORIZONTAL_ONLY
    """

    DRAG_THRESHOLD = 2
    HORIZONTAL_ONLY = False

    session: BoardSession

    def _init_draggable(self) -> None:
        self._drag_start_pos: Offset | None = None
        self._dragging = False
        self._current_target: DropTarget | None = None

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def on_mouse_down(self, event) -> None:
        if event.button != 1:
            return
        event.stop()
        event.prevent_default()
        self._drag_start_pos = Offset(event.screen_x, event.screen_y)
        self.capture_mouse()

    def on_mouse_move(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        event.prevent_default()
        dx = abs(event.screen_x - self._drag_start_pos.x)
        dy = abs(event.screen_y - self._drag_start_pos.y)
        threshold_exceeded = (
            dx > self.DRAG_THRESHOLD if self.HORIZONTAL_ONLY else (dx > self.DRAG_THRESHOLD or dy > self.DRAG_THRESHOLD)
        )
        if threshold_exceeded:
            self.release_mouse()
            self._drag_start_pos = None
            self.drag_begin()

    def on_mouse_up(self, event) -> None:
        event.stop()
        event.prevent_default()
        self.release_mouse()
        if self._drag_start_pos is not None:
            self._drag_start_pos = None
            self.draggable_clicked()

    def drag_begin(self) -> None:
        """Pick the widget up: start a drag session and route the mouse via the screen."""
        kind, container_id, index = self.drag_origin()
        self.session.drag_start(kind, container_id, index)
        self._dragging = True
        self.add_class("dragging")
        self.screen.set_focus(None)
        self.screen._active_draggable = self
        self.screen.capture_mouse()

    def drag_move(self, x: int, y: int) -> None:
        """Called by the screen on mouse move during a drag."""
        target = self._find_drop_target(x, y)
        if target is not self._current_target:
            if self._current_target is not None:
                self._current_target.drag_away(self)
            if target is not None:
                target.drag_over(self)
            self._current_target = target

        slot = target.drop_slot(self, x, y) if target is not None else None
        if slot is None:
            self.session.drag_away()
        else:
            self.session.drag_update(*slot)

    def drag_finish(self, x: int, y: int) -> CommittedMove | None:
        """Called by the screen on mouse-up. Drops at the slot under the pointer."""
        self.drag_move(x, y)
        self._drag_cleanup()
        return self.session.drag_end()

    def drag_cancel(self) -> None:
        """Put the widget back without changing anything."""
        self._drag_cleanup()
        self.session.drag_cancel()

    def _drag_cleanup(self) -> None:
        self.screen.release_mouse()
        if self._current_target is not None:
            self._current_target.drag_away(self)
            self._current_target = None
        self._dragging = False
        self.remove_class("dragging")
        if getattr(self.screen, "_active_draggable", None) is self:
            self.screen._active_draggable = None

    def _find_drop_target(self, x: int, y: int) -> DropTarget | None:
        """Find the innermost DropTarget at screen position that accepts this widget."""
        for widget, _region in self.screen.get_widgets_at(x, y):
            candidate = widget
            while candidate is not None:
                if isinstance(candidate, DropTarget) and candidate.accepts(self):
                    return candidate
                candidate = candidate.parent
        return None

    def drag_origin(self) -> tuple[Kind, str, int]:
        """Where the drag starts: (kind, container id, index). Override in subclass."""
        raise NotImplementedError

    def draggable_clicked(self) -> None:
        """Called when mouse released without dragging."""
