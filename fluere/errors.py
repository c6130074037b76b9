"""
Errors raised by the drawing and palette engines.
Everything is reported synchronously to the caller; nothing is retried internally.
"""


class FluereError(Exception):
    """Base class for all fluere errors."""


class InvalidParameterError(FluereError, ValueError):
    """A scene, field or table parameter was rejected before construction."""
    def __init__(self, message: str, name: str = "", value: object = None):
        super().__init__(message)
        self.name = name
        self.value = value


class PaletteParseError(FluereError):
    """Palette text is malformed (missing field, bad hex, count mismatch)."""
    def __init__(self, message: str, line: int | None = None, token: str | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
        self.token = token


class RenderCancelled(FluereError):
    """An index image fill was superseded before it finished."""
