"""Linear container: children stacked along one axis."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from terminus.cli.core.events import Event
from terminus.cli.core.layout import MATCH_PARENT, WRAP_CONTENT, Dimension, Orientation, is_fixed, resolve_size
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import Container, View
from terminus.log import get_logger

logger = get_logger(__name__)


class LinearLayout(Container):
    """
    Stacks children top-to-bottom (VERTICAL) or left-to-right (HORIZONTAL).

    Sizing runs in two passes over the children:

    1. Measure each child unconstrained. Children with a fixed size on an
       axis (ABSOLUTE, or a container wrapping its content) report it;
       MATCH_PARENT children report nothing.
    2. Split what the fixed children leave on the main axis evenly between
       the flexible ones, then measure every child for real, capping the
       running main-axis total at the space offered to the layout.

    The layout ends up as large as its children: main axis is their sum,
    cross axis their maximum.
    """

    def __init__(
        self,
        screen: Screen,
        orientation: Orientation = Orientation.VERTICAL,
        width: Dimension = MATCH_PARENT,
        height: Dimension = MATCH_PARENT,
        children: Iterable[View] = (),
    ) -> None:
        super().__init__(screen, width, height)
        self.orientation = orientation
        self._children: list[View] = []
        for child in children:
            self.push(child)

    def children(self) -> Iterator[View]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def push(self, child: View) -> View:
        """Append an owned child at the end of the main axis."""
        self._children.append(self.adopt(child))
        self.request_layout()
        return child

    # ------------------------------------------------------------------
    # Axis helpers
    # ------------------------------------------------------------------

    @property
    def _vertical(self) -> bool:
        return self.orientation is Orientation.VERTICAL

    def _main(self, view: View) -> int:
        return (view.h if self._vertical else view.w) or 0

    def _cross(self, view: View) -> int:
        return (view.w if self._vertical else view.h) or 0

    def _main_dimension(self, view: View) -> Dimension:
        return view.height if self._vertical else view.width

    def _cross_dimension(self, view: View) -> Dimension:
        return view.width if self._vertical else view.height

    def _measure_child(self, child: View, main: Optional[int], cross: Optional[int]) -> None:
        if self._vertical:
            child.measure(cross, main)
        else:
            child.measure(main, cross)

    @staticmethod
    def _bound(dimension: Dimension, spec: Optional[int]) -> Optional[int]:
        """Largest size this layout may take on an axis, None when unbounded."""
        if dimension is WRAP_CONTENT:
            return spec
        if dimension is MATCH_PARENT and spec is None:
            return None
        return resolve_size(dimension, spec)

    # ------------------------------------------------------------------
    # Measure / layout
    # ------------------------------------------------------------------

    def measure(self, width_spec: Optional[int], height_spec: Optional[int]) -> None:
        self._width_spec = width_spec
        self._height_spec = height_spec
        main_spec, cross_spec = (height_spec, width_spec) if self._vertical else (width_spec, height_spec)
        main_max = self._bound(self._main_dimension(self), main_spec)
        cross_max = self._bound(self._cross_dimension(self), cross_spec)

        # Intrinsic pass
        intrinsic_main: list[Optional[int]] = []
        min_main = 0
        cross_extent = 0
        for child in self._children:
            self._measure_child(child, None, None)
            if is_fixed(self._main_dimension(child)):
                intrinsic_main.append(self._main(child))
                min_main += self._main(child)
            else:
                intrinsic_main.append(None)
            if is_fixed(self._cross_dimension(child)):
                cross_extent = max(cross_extent, self._cross(child))

        # Space left over for the flexible children
        unsized = intrinsic_main.count(None)
        share: Optional[int] = None
        extra = 0
        if main_max is not None:
            remaining = max(0, main_max - min_main)
            if min_main > main_max:
                logger.debug("fixed children need %d rows/cols, only %d offered", min_main, main_max)
            if unsized:
                share, extra = divmod(remaining, unsized)

        # A layout wrapping its cross axis offers children the widest fixed child
        cross_offer = cross_max
        if self._cross_dimension(self) is WRAP_CONTENT:
            cross_offer = cross_extent if cross_max is None else min(cross_extent, cross_max)

        # Resolve pass
        used = 0
        flexible_seen = 0
        for child, fixed_main in zip(self._children, intrinsic_main):
            if fixed_main is not None:
                request: Optional[int] = fixed_main
            elif share is not None:
                # Leftover cells from the even split go to the first flexible children
                request = share + (1 if flexible_seen < extra else 0)
                flexible_seen += 1
            else:
                request = None
            if main_max is not None:
                available = max(0, main_max - used)
                request = available if request is None else min(request, available)
            self._measure_child(child, request, cross_offer)
            used += self._main(child)

        main_total = sum(self._main(child) for child in self._children)
        cross_total = max((self._cross(child) for child in self._children), default=0)
        if self._vertical:
            self.w, self.h = cross_total, main_total
        else:
            self.w, self.h = main_total, cross_total

    def layout(self, top: int, left: int) -> None:
        self.y = top
        self.x = left
        offset = 0
        for child in self._children:
            if self._vertical:
                child.layout(top + offset, left)
            else:
                child.layout(top, left + offset)
            offset += self._main(child)

    def on_event(self, event: Event) -> None:
        """
        Forward the event to the children.

        A shown layout without a parent is the root of the tree: it also
        repeats its last measure/layout pass and repaints when a child asked
        for a new layout while handling it.
        """
        for child in list(self._children):
            child.event(event)

        if self.parent is None and self.visible and self.dirty and self.measured:
            self.relayout()
