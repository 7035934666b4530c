"""Sizing policies for views.

Every view carries one :class:`Dimension` per axis:

- ``MATCH_PARENT``: take whatever size the parent offers (0 if it offers none)
- ``WRAP_CONTENT``: size to the content; only containers can work this out
- ``Absolute(n)``:  ask for ``n`` cells, clamped to the offered size
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from terminus.errors import TerminusError


class WrapContentError(TerminusError, ValueError):
    """WRAP_CONTENT was requested on a view that cannot size itself from children."""


class Orientation(Enum):
    """Main axis of a linear container."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class _Flexible(Enum):
    MATCH_PARENT = "match_parent"
    WRAP_CONTENT = "wrap_content"

    def __repr__(self) -> str:
        return self.name


MATCH_PARENT = _Flexible.MATCH_PARENT
WRAP_CONTENT = _Flexible.WRAP_CONTENT


@dataclass(frozen=True)
class Absolute:
    """Fixed size request in cells."""
    size: int

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"Absolute size must be >= 0, got {self.size}")


Dimension = Union[_Flexible, Absolute]


def resolve_size(dimension: Dimension, spec: Optional[int]) -> int:
    """
    Resolve a leaf's size along one axis from the size its parent offers.

    ``spec`` is None when the parent measures without a constraint.
    """
    if isinstance(dimension, Absolute):
        if spec is None:
            return dimension.size
        return min(dimension.size, spec)
    if dimension is MATCH_PARENT:
        return spec if spec is not None else 0
    raise WrapContentError("WRAP_CONTENT has no meaning without children to measure")


def is_fixed(dimension: Dimension) -> bool:
    """Whether a view reports its own size when measured unconstrained."""
    return dimension is not MATCH_PARENT
