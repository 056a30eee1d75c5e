from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorVal:
    """Describes a Plume failure: its kind, message and source line."""
    name: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.name}: {self.message}"
        return f"{self.name} [line {self.line}]: {self.message}"


class PlumeError(Exception):
    """Exception type used to propagate Plume lex, parse and runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name

    @property
    def line(self) -> Optional[int]:
        return self.err.line


class LexError(PlumeError):
    """Malformed token: unknown character or unterminated string."""
    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(ErrorVal('LexError', message, line))


class ParseError(PlumeError):
    """Unexpected token or malformed grammar."""
    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(ErrorVal('ParseError', message, line))
