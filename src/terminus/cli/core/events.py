"""Events pumped through the view tree.

Key presses arrive as :class:`~terminus.cli.core.input.KeyEvent`; everything
else is one of the dataclasses below. Events are handled one at a time in
the order they were posted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, Optional, TypeVar, Union

from terminus.cli.core.input import KeyEvent
from terminus.core.message import Message
from terminus.core.roster import Contact, Occupant

if TYPE_CHECKING:
    from terminus.cli.widgets.base import View

T = TypeVar("T")


class ResultSlot(Generic[T]):
    """Single-value cell a widget fills in when answering a request event."""

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._filled = False

    @property
    def filled(self) -> bool:
        return self._filled

    def fill(self, value: T) -> None:
        self._value = value
        self._filled = True

    def get(self) -> T:
        if not self._filled:
            raise LookupError("result slot was never filled")
        return self._value  # type: ignore[return-value]


@dataclass(frozen=True)
class Resize:
    """Terminal size changed."""
    width: int
    height: int


@dataclass(frozen=True)
class AddWindow:
    """A new window named ``name`` showing ``view`` was created."""
    name: str
    view: Optional[View] = field(default=None, compare=False)


@dataclass(frozen=True)
class ChangeWindow:
    name: str


@dataclass(frozen=True)
class CloseWindow:
    name: str


@dataclass(frozen=True)
class Connected:
    """An account finished connecting."""
    account: str


@dataclass(frozen=True)
class MessageReceived:
    message: Message


@dataclass(frozen=True)
class ContactUpdate:
    """A roster entry was received or changed."""
    contact: Contact


@dataclass(frozen=True)
class OccupantUpdate:
    """``occupant`` joined, or changed role in, the group chat ``conversation``."""
    conversation: str
    occupant: Occupant


@dataclass(frozen=True)
class Complete:
    """Ask the input line for ``(text, caret, password)``."""
    slot: ResultSlot[tuple[str, int, bool]]


@dataclass(frozen=True)
class Validate:
    """Ask the input line for ``(text, password)`` and clear it."""
    slot: ResultSlot[tuple[str, bool]]


@dataclass(frozen=True)
class Completed:
    """Replace the input line with a completed command line."""
    text: str


@dataclass(frozen=True)
class ReadPassword:
    """Switch the input line to masked entry for the next submission."""


@dataclass(frozen=True)
class Quit:
    pass


Event = Union[
    KeyEvent,
    Resize,
    AddWindow,
    ChangeWindow,
    CloseWindow,
    Connected,
    MessageReceived,
    ContactUpdate,
    OccupantUpdate,
    Complete,
    Validate,
    Completed,
    ReadPassword,
    Quit,
]

