"""Messages shown in scrollback windows.

Anything displayed by a :class:`~terminus.cli.widgets.buffered_win.BufferedWin`
follows the :class:`Message` protocol: a stable identity used to drop
redelivered copies, one or more display lines, equality and ``copy()``.

Identity policy: a transport-assigned id is used when one exists; locally
produced messages get a fresh ``uuid4``. Producers must never give two
distinct messages the same id.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Hashable, Optional, Protocol, TypeVar, runtime_checkable

from terminus.core.style import FG_GREEN, FG_WHITE, FG_YELLOW

M = TypeVar("M", bound="Message")


def new_message_id() -> str:
    """Locally generated identity for messages without a transport id."""
    return str(uuid.uuid4())


@runtime_checkable
class Message(Protocol):
    """Capabilities a scrollback window needs from what it displays."""

    @property
    def identity(self) -> Hashable:
        ...

    def lines(self) -> list[str]:
        ...

    def copy(self: M) -> M:
        ...


def _clock(timestamp: datetime) -> str:
    return timestamp.astimezone().strftime("%H:%M:%S")


@dataclass(frozen=True)
class LogMessage:
    """Informational line written to the console window."""
    body: str
    id: str = field(default_factory=new_message_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @property
    def identity(self) -> str:
        return self.id

    def lines(self) -> list[str]:
        clock = _clock(self.timestamp)
        return [f"{FG_WHITE}{clock} - {line}" for line in self.body.splitlines() or [""]]

    def copy(self) -> LogMessage:
        return replace(self)


class Direction(Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class ChatKind(Enum):
    CHAT = "chat"
    GROUPCHAT = "groupchat"


@dataclass(frozen=True)
class ChatMessage:
    """
    A conversation message, either received or sent by us.

    ``sender`` and ``recipient`` are bare addresses; ``nick`` is the room
    nickname of the author for group chats.
    """
    id: str
    direction: Direction
    sender: str
    recipient: str
    body: str
    kind: ChatKind = ChatKind.CHAT
    nick: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @classmethod
    def incoming(
        cls,
        sender: str,
        recipient: str,
        body: str,
        id: Optional[str] = None,
        kind: ChatKind = ChatKind.CHAT,
        nick: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> ChatMessage:
        return cls(
            id=id or new_message_id(),
            direction=Direction.INCOMING,
            sender=sender,
            recipient=recipient,
            body=body,
            kind=kind,
            nick=nick,
            timestamp=timestamp or datetime.now().astimezone(),
        )

    @classmethod
    def outgoing(
        cls,
        sender: str,
        recipient: str,
        body: str,
        id: Optional[str] = None,
        kind: ChatKind = ChatKind.CHAT,
        timestamp: Optional[datetime] = None,
    ) -> ChatMessage:
        return cls(
            id=id or new_message_id(),
            direction=Direction.OUTGOING,
            sender=sender,
            recipient=recipient,
            body=body,
            kind=kind,
            timestamp=timestamp or datetime.now().astimezone(),
        )

    @property
    def identity(self) -> str:
        return self.id

    @property
    def conversation(self) -> str:
        """Name of the window this message belongs to (the remote party)."""
        if self.direction is Direction.INCOMING:
            return self.sender
        return self.recipient

    @property
    def author(self) -> str:
        if self.direction is Direction.OUTGOING:
            return "me"
        if self.kind is ChatKind.GROUPCHAT and self.nick:
            return self.nick
        return self.sender

    def lines(self) -> list[str]:
        clock = _clock(self.timestamp)
        color = FG_YELLOW if self.direction is Direction.OUTGOING else FG_GREEN
        head = f"{FG_WHITE}{clock} - {color}{self.author}:{FG_WHITE} "
        # Continuation lines line up under the first line of the body
        padding = " " * len(f"{clock} - {self.author}: ")
        body_lines = self.body.splitlines() or [""]
        return [head + body_lines[0]] + [padding + line for line in body_lines[1:]]

    def copy(self) -> ChatMessage:
        return replace(self)
