"""Exception hierarchy shared by the toolkit."""


class TerminusError(Exception):
    """Base class for all errors raised by terminus."""


class ConfigError(TerminusError, ValueError):
    """Configuration file could not be read or has invalid values."""


class UnknownWindowError(TerminusError, KeyError):
    """No console window has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown window {self.name}"
