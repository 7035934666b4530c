"""Views composed into the console screen."""

from terminus.cli.widgets.base import Container, Rect, View
from terminus.cli.widgets.buffered_win import BufferedWin
from terminus.cli.widgets.frame_layout import FrameLayout
from terminus.cli.widgets.input_line import InputLine
from terminus.cli.widgets.linear_layout import LinearLayout
from terminus.cli.widgets.list_view import ListView
from terminus.cli.widgets.title_bar import TitleBar
from terminus.cli.widgets.win_bar import WinBar

__all__ = [
    "Container",
    "Rect",
    "View",
    "BufferedWin",
    "FrameLayout",
    "InputLine",
    "LinearLayout",
    "ListView",
    "TitleBar",
    "WinBar",
]
