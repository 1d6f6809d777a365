"""
Errors - Fatal conditions raised by the ifcmp pipeline.

Discrepancies between code and README are not errors; they are returned as
results. Everything here aborts the check with exit status 1.
"""

from typing import Optional


class IfcmpError(Exception):
    """Base class for all ifcmp failures.

    Attributes:
        message: What went wrong
        path: Optional file the failure relates to
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"path={self.path}")
        return " | ".join(parts)


class UsageError(IfcmpError):
    """Wrong command line invocation."""


class FileReadError(IfcmpError):
    """An input file could not be read."""


class ParseError(IfcmpError):
    """Go source (real or synthesized from the README) failed to parse.

    Attributes:
        line: 1-based line of the first syntax error, if known
        column: 1-based column of the first syntax error, if known
    """

    def __init__(self, message: str, path: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        super().__init__(message, path)

    def __str__(self) -> str:
        if self.path and self.line:
            return f"{self.path}:{self.line}:{self.column or 1}: {self.message}"
        return super().__str__()


class InterfaceNotFound(IfcmpError):
    """No top-level type with the requested name exists."""

    def __init__(self, name: str, path: Optional[str] = None):
        self.name = name
        super().__init__(f"interface not found: {name}", path)


class NotAnInterface(IfcmpError):
    """The requested name is declared, but not as an interface type."""

    def __init__(self, name: str, kind: str, path: Optional[str] = None):
        self.name = name
        self.kind = kind
        super().__init__(f"{name} is not an interface (declared as {kind})", path)
