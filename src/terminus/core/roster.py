"""Contacts and room occupants shown in list panes.

A :class:`Contact` belongs to zero or more roster groups; an
:class:`Occupant` of a group chat is grouped by its :class:`Role`. Both are
keyed by ``identity`` so an update replaces the entry it refers to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(Enum):
    MODERATOR = "moderator"
    PARTICIPANT = "participant"
    VISITOR = "visitor"
    NONE = "none"

    def __str__(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Contact:
    """Roster entry for a remote address."""
    address: str
    name: Optional[str] = None
    groups: tuple[str, ...] = ()

    @property
    def identity(self) -> str:
        return self.address

    def __str__(self) -> str:
        return self.name or self.address


@dataclass(frozen=True)
class Occupant:
    """A participant of a group chat, known by its room nickname."""
    nick: str
    role: Role = Role.PARTICIPANT
    address: Optional[str] = None

    @property
    def identity(self) -> str:
        return self.nick

    def __str__(self) -> str:
        return self.nick
