"""Grouped list pane: items under bold group headers."""

from __future__ import annotations

from typing import Callable, Generic, Hashable, Iterable, Optional, TypeVar

from terminus.cli.core.ansi_text import fit
from terminus.cli.core.layout import MATCH_PARENT, Absolute, Dimension
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import View
from terminus.core.style import BOLD, NO_BOLD, RESET

G = TypeVar("G", bound=Hashable)
I = TypeVar("I")

DEFAULT_WIDTH = Absolute(24)


def _identity(item: object) -> Hashable:
    return getattr(item, "identity", item)  # type: ignore[return-value]


class ListView(View, Generic[G, I]):
    """
    Items sorted into named groups.

    Each group holds an item once, keyed by ``key`` (the item's
    ``identity`` by default); inserting an item already in the group
    replaces it where it stands. Groups appear in the order they were
    first used and disappear when emptied.

    Items without a group are only accepted after :meth:`with_none_group`.
    They are listed first, without a header.
    """

    def __init__(
        self,
        screen: Screen,
        width: Dimension = DEFAULT_WIDTH,
        height: Dimension = MATCH_PARENT,
        key: Optional[Callable[[I], Hashable]] = None,
    ) -> None:
        super().__init__(screen, width, height)
        self.groups: dict[Optional[G], dict[Hashable, I]] = {}
        self.none_group = False
        self._key = key or _identity

    def with_none_group(self) -> ListView[G, I]:
        """Accept items that belong to no group."""
        self.none_group = True
        return self

    def __len__(self) -> int:
        return sum(len(items) for items in self.groups.values())

    def items(self, group: Optional[G] = None) -> list[I]:
        return list(self.groups.get(group, {}).values())

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def insert(self, item: I, group: Optional[G] = None) -> None:
        """Add ``item`` to ``group``, replacing the entry with the same key."""
        if group is None and not self.none_group:
            raise ValueError(f"{type(self).__name__} has no section for ungrouped items")
        self.groups.setdefault(group, {})[self._key(item)] = item
        self.redraw()

    def remove(self, item: I) -> bool:
        """Drop ``item`` from every group. Returns True if it was listed."""
        key = self._key(item)
        found = False
        for group in list(self.groups):
            items = self.groups[group]
            if key in items:
                del items[key]
                found = True
                if not items:
                    del self.groups[group]
        if found:
            self.redraw()
        return found

    def set_groups(self, item: I, groups: Iterable[Optional[G]]) -> None:
        """
        List ``item`` in exactly ``groups``.

        Groups it already belongs to keep its position; it is dropped from
        the others.
        """
        wanted = list(groups)
        key = self._key(item)
        for group in list(self.groups):
            if group not in wanted and key in self.groups[group]:
                del self.groups[group][key]
                if not self.groups[group]:
                    del self.groups[group]
        for group in wanted:
            self.insert(item, group)

    def clear(self) -> None:
        self.groups.clear()
        self.redraw()

    def lines(self) -> list[str]:
        """Display rows, top to bottom."""
        rows = [str(item) for item in self.items(None)]
        for group, items in self.groups.items():
            if group is None:
                continue
            rows.append(f"{BOLD}{group}{NO_BOLD}")
            rows.extend(f"  {item}" for item in items.values())
        return rows

    # ------------------------------------------------------------------
    # View protocol
    # ------------------------------------------------------------------

    def paint(self) -> None:
        width = self.w or 0
        rows = self.lines()
        for row in range(self.h or 0):
            self.screen.goto(self.x, self.y + row)
            if row < len(rows):
                self.screen.write(fit(rows[row], width) + RESET)
            else:
                self.screen.write(" " * width)
