"""Frame container holding at most one swappable child."""

from __future__ import annotations

from typing import Iterator, Optional

from terminus.cli.core.layout import MATCH_PARENT, WRAP_CONTENT, Dimension, resolve_size
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import Container, View


class FrameLayout(Container):
    """
    Shows zero or one child in its whole area.

    The child can be swapped at any time with :meth:`set_child`; the new
    child is measured and laid out against the frame's last bounds right
    away, so switching the visible window does not need a full pass over
    the tree.
    """

    def __init__(
        self,
        screen: Screen,
        width: Dimension = MATCH_PARENT,
        height: Dimension = MATCH_PARENT,
        child: Optional[View] = None,
    ) -> None:
        super().__init__(screen, width, height)
        self._child: Optional[View] = None
        if child is not None:
            self._child = self.adopt(child)

    @property
    def child(self) -> Optional[View]:
        return self._child

    def children(self) -> Iterator[View]:
        if self._child is not None:
            yield self._child

    def set_child(self, child: Optional[View]) -> Optional[View]:
        """
        Show ``child`` in the frame and return the one it replaces.

        The replaced child is hidden and released by the frame.
        """
        previous = self._child
        if previous is child:
            return None
        if previous is not None:
            previous.visible = False
            previous.parent = None
        self._child = self.adopt(child) if child is not None else None

        if self.measured:
            if self._visible:
                with self.screen.session():
                    self.screen.clear_rect(self.x, self.y, self.w or 0, self.h or 0)
            if child is not None:
                child.measure(self.w, self.h)
                child.layout(self.y, self.x)
                child.redraw()
        return previous

    def clear(self) -> Optional[View]:
        """Remove the child, blanking the frame area."""
        return self.set_child(None)

    def measure(self, width_spec: Optional[int], height_spec: Optional[int]) -> None:
        self._width_spec = width_spec
        self._height_spec = height_spec
        if self._child is None:
            self.w = 0 if self.width is WRAP_CONTENT else resolve_size(self.width, width_spec)
            self.h = 0 if self.height is WRAP_CONTENT else resolve_size(self.height, height_spec)
            return

        own_w = width_spec if self.width is WRAP_CONTENT else resolve_size(self.width, width_spec)
        own_h = height_spec if self.height is WRAP_CONTENT else resolve_size(self.height, height_spec)
        self._child.measure(own_w, own_h)
        self.w = self._child.w if self.width is WRAP_CONTENT else own_w
        self.h = self._child.h if self.height is WRAP_CONTENT else own_h

    def layout(self, top: int, left: int) -> None:
        self.y = top
        self.x = left
        if self._child is not None:
            self._child.layout(top, left)
