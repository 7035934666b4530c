"""Interactive console: window management, command line and the event loop."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional

from terminus.cli.core.events import (
    AddWindow,
    ChangeWindow,
    CloseWindow,
    Complete,
    Completed,
    Connected,
    ContactUpdate,
    Event,
    MessageReceived,
    OccupantUpdate,
    Quit,
    ReadPassword,
    Resize,
    ResultSlot,
    Validate,
)
from terminus.cli.core.input import CancellationToken, InputClosed, InputReader, Key, KeyEvent
from terminus.cli.core.layout import Absolute, Orientation
from terminus.cli.core.terminal import Screen, Terminal
from terminus.cli.studio.commands import CommandRegistry, UnknownCommandError, default_registry
from terminus.cli.widgets.base import View
from terminus.cli.widgets.buffered_win import BufferedWin
from terminus.cli.widgets.frame_layout import FrameLayout
from terminus.cli.widgets.input_line import InputLine
from terminus.cli.widgets.linear_layout import LinearLayout
from terminus.cli.widgets.list_view import ListView
from terminus.cli.widgets.title_bar import TitleBar
from terminus.cli.widgets.win_bar import WinBar
from terminus.config import ConsoleConfig
from terminus.core.command import Command, CommandParseError, CompletionCycle, assemble, parse, parse_with_cursor
from terminus.core.message import ChatKind, ChatMessage, Direction, LogMessage, Message
from terminus.core.roster import Contact, Occupant, Role
from terminus.errors import UnknownWindowError
from terminus.log import get_logger

logger = get_logger(__name__)

CONSOLE_WINDOW = "console"

CompletionProvider = Callable[["ConsoleApp", Command], list[str]]
SendHandler = Callable[[ChatMessage], None]


def _is_log(message: Message) -> bool:
    return isinstance(message, LogMessage)


def _roster_event(view: ListView[str, Contact], event: Event) -> None:
    if isinstance(event, ContactUpdate):
        contact = event.contact
        view.set_groups(contact, contact.groups or (None,))


class ConsoleApp:
    """
    Text console built from the widget tree.

    Layout, top to bottom: title bar, the frame showing the current window,
    the window bar and the input line. The ``console`` window holds log
    lines beside the contact roster and always exists; a conversation window
    is opened the first time a message for it arrives. Group chat windows
    list the room's occupants beside the messages.

    Events are queued with :meth:`post` and handled one at a time, in order,
    by :meth:`pump`. Typed lines starting with ``/`` are commands; anything
    else is sent to the conversation of the current window through
    ``on_send`` and echoed there.
    """

    def __init__(
        self,
        screen: Optional[Screen] = None,
        config: Optional[ConsoleConfig] = None,
        registry: Optional[CommandRegistry] = None,
        completion_provider: Optional[CompletionProvider] = None,
        on_send: Optional[SendHandler] = None,
    ) -> None:
        self.config = config or ConsoleConfig()
        self.screen = screen or Screen(flush_retries=self.config.flush_retries)
        self.registry = registry or default_registry()
        self.completion_provider = completion_provider
        self.on_send = on_send
        self.token = CancellationToken()
        self.account: Optional[str] = None

        # Window registry; the frame shows one of them at a time
        self.windows: list[str] = []
        self.current_window: Optional[str] = None
        self._views: dict[str, View] = {}
        self._buffers: dict[str, BufferedWin] = {}

        self._queue: deque[Event] = deque()
        self._completion = CompletionCycle()
        self._password_command: Optional[Command] = None
        self._size: Optional[tuple[int, int]] = None

        # Widgets
        self.title_bar = TitleBar(self.screen, self.config.title())
        self.frame = FrameLayout(self.screen)
        self.win_bar = WinBar(self.screen, self.config.bar())
        self.input_line = InputLine(self.screen, self.config.history_size)
        self.root = LinearLayout(
            self.screen,
            Orientation.VERTICAL,
            children=[self.title_bar, self.frame, self.win_bar, self.input_line],
        )

        self.console: BufferedWin[LogMessage] = BufferedWin(self.screen, accept=_is_log)
        self.roster: ListView[str, Contact] = (
            ListView(self.screen, width=Absolute(self.config.roster_width))
            .with_none_group()
            .with_event(_roster_event)
        )
        self._buffers[CONSOLE_WINDOW] = self.console
        self.add_window(
            CONSOLE_WINDOW,
            LinearLayout(self.screen, Orientation.HORIZONTAL, children=[self.console, self.roster]),
        )
        self.change_window(CONSOLE_WINDOW)

    @property
    def running(self) -> bool:
        return not self.token.cancelled

    # ------------------------------------------------------------------
    # Event queue
    # ------------------------------------------------------------------

    def post(self, event: Event) -> None:
        """Queue an event for :meth:`pump`."""
        self._queue.append(event)

    def pump(self) -> None:
        """Handle queued events in order, including any posted while handling."""
        while self._queue:
            self.handle_event(self._queue.popleft())

    def start(self, width: int, height: int) -> None:
        """First full measure/layout/redraw pass at the given terminal size."""
        self.handle_event(Resize(width, height))

    def handle_event(self, event: Event) -> None:
        logger.debug("event %r", event)
        if isinstance(event, KeyEvent):
            self._handle_key(event)
        elif isinstance(event, Resize):
            self._resize(event.width, event.height)
        elif isinstance(event, MessageReceived):
            self._deliver(event.message)
        elif isinstance(event, ChangeWindow):
            self.change_window(event.name)
        elif isinstance(event, CloseWindow):
            self.close_window(event.name)
        elif isinstance(event, AddWindow):
            self.add_window(event.name, event.view)
        elif isinstance(event, (ContactUpdate, OccupantUpdate)):
            self._update_lists(event)
        elif isinstance(event, Connected):
            self.account = event.account
            self.root.event(event)
        elif isinstance(event, Quit):
            self.quit()
        else:
            self.root.event(event)

    def _resize(self, width: int, height: int) -> None:
        self._size = (width, height)
        with self.screen.session():
            self.screen.clear()
        self.root.measure(width, height)
        self.root.layout(1, 1)
        self.root.redraw()

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------

    def window(self, name: str) -> View:
        try:
            return self._views[name]
        except KeyError:
            raise UnknownWindowError(name) from None

    def buffer(self, name: str) -> Optional[BufferedWin]:
        """Message log shown in window ``name``, if it has one."""
        self.window(name)
        return self._buffers.get(name)

    def add_window(self, name: str, view: Optional[View] = None, kind: ChatKind = ChatKind.CHAT) -> View:
        """
        Register a window; an existing window of the same name is kept.

        Without ``view`` a conversation window of the given ``kind`` is built.
        """
        if name in self._views:
            return self._views[name]
        if view is None:
            view = self._conversation_view(name, kind)
        elif isinstance(view, BufferedWin):
            self._buffers[name] = view
        view.visible = False
        self.windows.append(name)
        self._views[name] = view
        self.root.event(AddWindow(name, view))
        logger.info("window %s opened", name)
        return view

    def _conversation_view(self, name: str, kind: ChatKind) -> View:
        def on_message(view: BufferedWin[ChatMessage], event: Event) -> None:
            if isinstance(event, MessageReceived):
                message = event.message
                if isinstance(message, ChatMessage) and message.conversation == name:
                    if view.insert(message) and message.direction is Direction.INCOMING:
                        view.bell()
            else:
                view.on_event(event)

        def on_occupant(view: ListView[Role, Occupant], event: Event) -> None:
            if isinstance(event, OccupantUpdate) and event.conversation == name:
                view.set_groups(event.occupant, (event.occupant.role,))

        chat: BufferedWin[ChatMessage] = BufferedWin(self.screen).with_event(on_message)
        self._buffers[name] = chat
        if kind is not ChatKind.GROUPCHAT:
            return chat
        occupants: ListView[Role, Occupant] = ListView(
            self.screen, width=Absolute(self.config.roster_width)
        ).with_event(on_occupant)
        return LinearLayout(self.screen, Orientation.HORIZONTAL, children=[chat, occupants])

    def change_window(self, name: str) -> None:
        """Show window ``name``. An unknown name is reported in the console window."""
        try:
            view = self.window(name)
        except UnknownWindowError as e:
            self.log(str(e))
            return
        self.frame.set_child(view)
        self.current_window = name
        self.root.event(ChangeWindow(name))

    def close_window(self, name: str) -> None:
        if name == CONSOLE_WINDOW:
            self.log("The console window cannot be closed")
            return
        try:
            self.window(name)
        except UnknownWindowError as e:
            self.log(str(e))
            return
        if name == self.current_window:
            index = self.windows.index(name)
            self.change_window(self.windows[index - 1])
        self.windows.remove(name)
        del self._views[name]
        self._buffers.pop(name, None)
        self.root.event(CloseWindow(name))
        logger.info("window %s closed", name)

    def next_window(self) -> None:
        if self.current_window is None:
            if self.windows:
                self.change_window(self.windows[0])
            return
        index = self.windows.index(self.current_window)
        if index < len(self.windows) - 1:
            self.change_window(self.windows[index + 1])

    def prev_window(self) -> None:
        if self.current_window is None:
            if self.windows:
                self.change_window(self.windows[0])
            return
        index = self.windows.index(self.current_window)
        if index > 0:
            self.change_window(self.windows[index - 1])

    def clear_window(self) -> None:
        """Forget the messages of the current window."""
        if self.current_window is None:
            return
        buffer = self._buffers.get(self.current_window)
        if buffer is not None:
            buffer.clear()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def log(self, text: str) -> None:
        """Write an informational line to the console window."""
        logger.info("%s", text)
        self._deliver(LogMessage(text))

    def _deliver(self, message: Message) -> None:
        if isinstance(message, ChatMessage):
            target = message.conversation
            self.add_window(target, kind=message.kind)
        else:
            target = CONSOLE_WINDOW

        self._broadcast(MessageReceived(message))

        if target != self.current_window:
            self.win_bar.highlight_window(target)

    def _update_lists(self, event: Event) -> None:
        if isinstance(event, OccupantUpdate):
            self.add_window(event.conversation, kind=ChatKind.GROUPCHAT)
        self._broadcast(event)

    def _broadcast(self, event: Event) -> None:
        """Hand ``event`` to every window, shown or not."""
        for view in list(self._views.values()):
            view.event(event)

    def send(self, text: str) -> None:
        """Send ``text`` to the conversation shown in the current window."""
        if self.current_window is None or self.current_window == CONSOLE_WINDOW:
            self.log("Not in a conversation window")
            return
        message = ChatMessage.outgoing(self.account or "me", self.current_window, text)
        if self.on_send is not None:
            self.on_send(message)
        self._deliver(message)

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def read_password(self, command: Command) -> None:
        """Mask the next submitted line and append it to ``command`` as its last argument."""
        self._password_command = command
        self.root.event(ReadPassword())

    def run_command(self, command: Command) -> None:
        try:
            self.registry.dispatch(self, command)
        except (UnknownCommandError, UnknownWindowError) as e:
            self.log(str(e))

    def quit(self) -> None:
        logger.info("quit requested")
        self.token.cancel()

    def _handle_key(self, event: KeyEvent) -> None:
        if event.key is Key.TAB:
            self._complete()
            return

        self._completion.reset()
        if event.key is Key.ENTER:
            self._validate()
        elif event.is_ctrl('c'):
            self.quit()
        elif event.is_ctrl('n'):
            self.next_window()
        elif event.is_ctrl('p'):
            self.prev_window()
        elif event.is_ctrl('l'):
            if self._size is not None:
                self._resize(*self._size)
        else:
            self.root.event(event)

    def _validate(self) -> None:
        slot: ResultSlot[tuple[str, bool]] = ResultSlot()
        self.root.event(Validate(slot))
        text, password = slot.get()

        if password:
            command, self._password_command = self._password_command, None
            if command is not None:
                self.run_command(command.with_arg(text))
        elif text.startswith("/"):
            try:
                command = parse(text)
            except CommandParseError as e:
                self.log(str(e))
                return
            self.run_command(command)
        elif text:
            self.send(text)

    def _complete(self) -> None:
        slot: ResultSlot[tuple[str, int, bool]] = ResultSlot()
        self.root.event(Complete(slot))
        text, caret, password = slot.get()
        if password or not text.startswith("/"):
            return
        try:
            command = parse_with_cursor(text, caret)
        except CommandParseError:
            return

        if not self._completion.active:
            candidates = self.registry.complete(self, command)
            if self.completion_provider is not None:
                candidates = candidates + list(self.completion_provider(self, command))
            self._completion.start(command, candidates)
        self.post(Completed(assemble(self._completion.next(command))))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self, reader: Optional[InputReader] = None) -> None:
        """Own the terminal until quit is requested."""
        reader = reader or InputReader(self.token)
        with Terminal.managed_mode(self.screen.stream):
            size = Terminal.size()
            self.start(size.cols, size.rows)
            while True:
                size = Terminal.size()
                if (size.cols, size.rows) != self._size:
                    self.post(Resize(size.cols, size.rows))
                try:
                    key = reader.read(self.config.input_timeout)
                except InputClosed:
                    break
                if key is not None:
                    self.post(key)
                self.pump()
        logger.info("console stopped")


def run_console(config: Optional[ConsoleConfig] = None) -> None:
    """Launch the console application."""
    config = config or ConsoleConfig()
    app = ConsoleApp(config=config)
    app.run()
