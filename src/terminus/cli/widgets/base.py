"""Base view protocol: geometry, measure/layout/redraw and event dispatch."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar, Iterator, Optional, TypeVar

from terminus.cli.core.events import Event
from terminus.cli.core.layout import MATCH_PARENT, WRAP_CONTENT, Dimension, WrapContentError, resolve_size
from terminus.cli.core.terminal import Screen

V = TypeVar("V", bound="View")


@dataclass
class Rect:
    """Rectangle bounds for view positioning."""
    x: int
    y: int
    width: int
    height: int


class View(ABC):
    """
    A node of the view tree.

    Lifecycle of one pass over the tree:

    1. ``measure(width_spec, height_spec)`` resolves ``w``/``h``
    2. ``layout(top, left)`` assigns ``x``/``y``
    3. ``redraw()`` paints into the shared :class:`Screen`

    Leaves paint in :meth:`paint`; containers override the three pass
    methods and delegate to their children. A view that was never measured,
    or was measured to zero rows or columns, does not paint; neither does a
    hidden view.
    """

    is_container: ClassVar[bool] = False

    def __init__(
        self,
        screen: Screen,
        width: Dimension = MATCH_PARENT,
        height: Dimension = MATCH_PARENT,
    ) -> None:
        if not self.is_container and (width is WRAP_CONTENT or height is WRAP_CONTENT):
            raise WrapContentError(f"{type(self).__name__} cannot wrap its content")
        self.screen = screen
        self.width = width
        self.height = height
        self.x = 1
        self.y = 1
        self.w: Optional[int] = None
        self.h: Optional[int] = None
        self.dirty = True
        self.parent: Optional[View] = None
        self._visible = True
        self._event_handler: Optional[Callable[[View, Event], None]] = None
        self._width_spec: Optional[int] = None
        self._height_spec: Optional[int] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        self._visible = value

    @property
    def measured(self) -> bool:
        return self.w is not None and self.h is not None

    @property
    def has_area(self) -> bool:
        """Measured to at least one cell; a zero-sized view paints nothing."""
        return bool(self.w) and bool(self.h)

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.w or 0, self.h or 0)

    def children(self) -> Iterator[View]:
        """Owned child views, in paint order."""
        return iter(())

    def request_layout(self) -> None:
        """Mark this view and its ancestors as needing a new measure/layout pass."""
        view: Optional[View] = self
        while view is not None:
            view.dirty = True
            view = view.parent

    # ------------------------------------------------------------------
    # Measure / layout / redraw
    # ------------------------------------------------------------------

    def measure(self, width_spec: Optional[int], height_spec: Optional[int]) -> None:
        """Resolve ``w`` and ``h`` from this view's dimensions and the offered sizes."""
        self._width_spec = width_spec
        self._height_spec = height_spec
        self.w = resolve_size(self.width, width_spec)
        self.h = resolve_size(self.height, height_spec)

    def layout(self, top: int, left: int) -> None:
        """Place the view with its top-left corner at row ``top``, column ``left``."""
        self.y = top
        self.x = left

    def relayout(self) -> None:
        """Repeat the last measure and layout with the same inputs, then repaint."""
        self.measure(self._width_spec, self._height_spec)
        self.layout(self.y, self.x)
        self.redraw()

    def redraw(self) -> None:
        """Paint the current state. Calling it again without changes paints the same thing."""
        if not self._visible or not self.has_area:
            return
        with self.screen.session():
            self.paint()
        self.dirty = False

    @abstractmethod
    def paint(self) -> None:
        """Write this view's content to the screen (inside an open session)."""

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def with_event(self: V, handler: Callable[[V, Event], None]) -> V:
        """
        Install a per-instance event handler replacing :meth:`on_event`.

        The handler is called as ``handler(view, event)`` and may call
        ``view.on_event(event)`` to fall back to the default behavior.
        """
        self._event_handler = handler  # type: ignore[assignment]
        return self

    def event(self, event: Event) -> None:
        if self._event_handler is not None:
            self._event_handler(self, event)
        else:
            self.on_event(event)

    def on_event(self, event: Event) -> None:
        """Default event behavior: ignore."""


class Container(View):
    """A view that owns child views and delegates the tree passes to them."""

    is_container = True

    @View.visible.setter  # type: ignore[attr-defined]
    def visible(self, value: bool) -> None:
        self._visible = value
        for child in self.children():
            child.visible = value

    def adopt(self, child: View) -> View:
        """Take ownership of ``child``."""
        if child.parent is not None and child.parent is not self:
            raise ValueError(f"{type(child).__name__} already belongs to another container")
        child.parent = self
        child.visible = self._visible
        return child

    def redraw(self) -> None:
        if not self._visible:
            return
        for child in self.children():
            child.redraw()
        self.dirty = False

    def paint(self) -> None:
        # Containers have no content of their own; children paint themselves
        return None

    def on_event(self, event: Event) -> None:
        """Forward the event to every child, depth-first."""
        for child in list(self.children()):
            child.event(event)
