"""Text styling for the paint contract (SGR foreground/background/bold)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class ColorMode(Enum):
    """Color mode for SGR sequences."""
    STANDARD_16 = "16"      # SGR 30-37, 40-47, 90-97, 100-107
    EXTENDED_256 = "256"    # SGR 38;5;n, 48;5;n


@dataclass(frozen=True)
class Color:
    """A terminal color, either one of the 16 named colors or a 256-palette index."""
    mode: ColorMode
    value: int

    NAMES: ClassVar[tuple[str, ...]] = (
        "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    )

    @classmethod
    def named(cls, name: str) -> Color:
        """
        Look up a color by name.

        Accepts the eight base names, their ``bright_`` variants and
        ``"color<n>"`` for a 256-palette index.
        """
        key = name.strip().lower().replace("-", "_").replace(" ", "_")
        bright = key.startswith("bright_")
        if bright:
            key = key[len("bright_"):]
        if key in cls.NAMES:
            return cls(ColorMode.STANDARD_16, cls.NAMES.index(key) + (8 if bright else 0))
        if key.startswith("color") and key[5:].isdigit() and not bright:
            return cls.from_256(int(key[5:]))
        raise ValueError(f"Unknown color name: {name!r}")

    @classmethod
    def from_256(cls, index: int) -> Color:
        """Create a Color from a 256-color index."""
        if not 0 <= index <= 255:
            raise ValueError(f"256-color index must be 0-255, got {index}")
        return cls(ColorMode.EXTENDED_256, index)

    def to_sgr_fg(self) -> str:
        if self.mode == ColorMode.STANDARD_16:
            return str(30 + self.value) if self.value < 8 else str(90 + self.value - 8)
        return f"38;5;{self.value}"

    def to_sgr_bg(self) -> str:
        if self.mode == ColorMode.STANDARD_16:
            return str(40 + self.value) if self.value < 8 else str(100 + self.value - 8)
        return f"48;5;{self.value}"


@dataclass(frozen=True)
class Style:
    """Foreground/background/bold attributes applied to a run of text."""
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    bold: bool = False

    @classmethod
    def from_names(cls, fg: Optional[str] = None, bg: Optional[str] = None, bold: bool = False) -> Style:
        return cls(
            fg=Color.named(fg) if fg else None,
            bg=Color.named(bg) if bg else None,
            bold=bold,
        )

    @property
    def is_plain(self) -> bool:
        return self.fg is None and self.bg is None and not self.bold

    def sgr(self) -> str:
        """Escape sequence that switches the terminal to this style."""
        codes: list[str] = []
        if self.bold:
            codes.append("1")
        if self.fg is not None:
            codes.append(self.fg.to_sgr_fg())
        if self.bg is not None:
            codes.append(self.bg.to_sgr_bg())
        if not codes:
            return ""
        return f"\x1b[{';'.join(codes)}m"


RESET = "\x1b[0m"
BOLD = "\x1b[1m"
NO_BOLD = "\x1b[22m"

# Foreground shortcuts used when formatting message lines
FG_WHITE = "\x1b[37m"
FG_GREEN = "\x1b[32m"
FG_YELLOW = "\x1b[33m"
