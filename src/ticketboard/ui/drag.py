"""Pointer tracking for dragging tickets between columns.

Two mixins:
- DraggableMixin: on dragged widgets, owns the "flying" phase
- DropTarget: on containers, names what a drop at a point lands on

Neither touches the board. The draggable reports "started" and "dropped
on <id>" through its hooks; the screen feeds those to the drag manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.geometry import Offset

if TYPE_CHECKING:
    from textual.widget import Widget


class DropTarget:
    """Mixin for widgets that can accept drops."""

    def drag_over(self, draggable: DraggableMixin, x: int, y: int) -> None:
        """Called while a draggable hovers over this target."""

    def drag_away(self, draggable: DraggableMixin) -> None:
        """Called when a draggable leaves this target."""

    def drop_id(self, draggable: DraggableMixin, x: int, y: int) -> str | None:
        """Id of what a drop at (x, y) lands on: a column key or a ticket id."""
        return None


class DraggableMixin:
    """Mixin for widgets that can be dragged.

    Subclasses should:
    - Call _init_draggable() in __init__
    - Implement draggable_make_ghost(), draggable_clicked(),
      draggable_started() and draggable_dropped(target_id)
    """

    DRAG_THRESHOLD = 2

    def _init_draggable(self) -> None:
        self._drag_start_pos: Offset | None = None
        self._dragging = False
        self._ghost: Widget | None = None
        self._drag_offset: Offset = Offset(0, 0)
        self._current_target: DropTarget | None = None

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
        if dx > self.DRAG_THRESHOLD or dy > self.DRAG_THRESHOLD:
            self.release_mouse()
            mouse_pos = self._drag_start_pos
            self._drag_start_pos = None
            self._drag_start(mouse_pos)

    def on_mouse_up(self, event) -> None:
        event.stop()
        event.prevent_default()
        self.release_mouse()
        if self._drag_start_pos is not None:
            self._drag_start_pos = None
            self.draggable_clicked()

    def _drag_start(self, mouse_pos: Offset) -> None:
        """Begin drag: create ghost, add .dragging class, register on screen."""
        self._dragging = True
        self.add_class("dragging")

        region = self.region
        self._drag_offset = Offset(mouse_pos.x - region.x, mouse_pos.y - region.y)

        self._ghost = self.draggable_make_ghost()
        self._ghost.styles.width = region.width
        self._ghost.styles.offset = (region.x, region.y)
        self.screen.mount(self._ghost)

        self.screen._active_draggable = self
        self.screen.capture_mouse()
        self.draggable_started()

    def _drag_move(self, x: int, y: int) -> None:
        """Called by screen on mouse move during drag."""
        if self._ghost is not None:
            self._ghost.styles.offset = (x - self._drag_offset.x, y - self._drag_offset.y)

        target = self._find_drop_target(x, y)
        if target is not self._current_target and self._current_target is not None:
            self._current_target.drag_away(self)
        self._current_target = target
        if target is not None:
            target.drag_over(self, x, y)

    def _drag_finish(self, x: int, y: int) -> None:
        """Called by screen on mouse-up. Resolve the drop id and report it."""
        self.screen.release_mouse()
        target_id = None
        target = self._find_drop_target(x, y)
        if target is not None:
            target_id = target.drop_id(self, x, y)
        self._drag_cleanup()
        self.draggable_dropped(target_id)

    def _drag_cancel(self) -> None:
        """Cancel drag: cleanup and report a drop on nothing."""
        self.screen.release_mouse()
        self._drag_cleanup()
        self.draggable_dropped(None)

    def _drag_cleanup(self) -> None:
        """Remove ghost, clear state, deregister from screen."""
        if self._current_target is not None:
            self._current_target.drag_away(self)
            self._current_target = None
        if self._ghost is not None:
            self._ghost.remove()
        self._ghost = None
        self._dragging = False
        self._drag_offset = Offset(0, 0)
        self.remove_class("dragging")
        if hasattr(self.screen, "_active_draggable"):
            self.screen._active_draggable = None

    def _find_drop_target(self, x: int, y: int) -> DropTarget | None:
        """Find the innermost DropTarget at screen position, skipping the ghost."""
        try:
            widgets = self.screen.get_widgets_at(x, y)
        except Exception:
            return None

        for widget, _region in widgets:
            if self._ghost is not None and (widget is self._ghost or self._ghost in widget.ancestors):
                continue
            candidate = widget
            while candidate is not None:
                if isinstance(candidate, DropTarget):
                    return candidate
                candidate = candidate.parent
        return None

    def draggable_make_ghost(self) -> Widget:
        raise NotImplementedError

    def draggable_clicked(self) -> None:
        raise NotImplementedError

    def draggable_started(self) -> None:
        raise NotImplementedError

    def draggable_dropped(self, target_id: str | None) -> None:
        raise NotImplementedError
