"""
Exception hierarchy for rdflite.

Graph queries never raise for "nothing found" conditions; these errors
are reserved for programmer mistakes (wrong argument types) and for
malformed serialized input.
"""

from typing import Optional


class RDFLiteError(Exception):
    """Base class for all rdflite errors."""
    pass


class InvalidArgument(RDFLiteError, TypeError):
    """Raised when a node, triple or pattern argument has an unexpected type."""
    pass


class ParseError(RDFLiteError, ValueError):
    """
    Raised when Turtle or N-Triples text cannot be parsed.

    Attributes:
        message: Human readable description of the problem
        source: The text that was being parsed (if available)
        line: 1-based line of the offending token (if known)
        column: 1-based column of the offending token (if known)
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.message = message
        self.source = source
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        return self.message
