"""Token types and token representation for FLang programs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FLangTokenType(Enum):
    """Token types for FLang programs."""
    INTEGER = "INTEGER"
    REAL = "REAL"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    QUOTE = "'"
    LPAREN = "("
    RPAREN = ")"
    NEWLINE = "NEWLINE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class FLangToken:
    """
    Represents a single token in an FLang program.

    Tokens carry no position.  Source lines are recovered by counting the
    NEWLINE tokens consumed so far.
    """
    type: FLangTokenType
    value: Any = None

    def describe(self) -> str:
        """Render the token the way it appeared in the source."""
        if self.type == FLangTokenType.NEWLINE:
            return "newline"

        if self.type == FLangTokenType.NULL:
            return "null"

        if self.type == FLangTokenType.BOOLEAN:
            return "true" if self.value else "false"

        if self.type in (FLangTokenType.QUOTE, FLangTokenType.LPAREN, FLangTokenType.RPAREN):
            return self.type.value

        return str(self.value)

    def __repr__(self) -> str:
        return f"FLangToken({self.type.name}, {self.value!r})"
