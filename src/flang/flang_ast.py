"""FLang AST Node hierarchy - parse-time representation with source line metadata.

Every FLang program is built from six element kinds: atoms, integers, reals,
booleans, null and lists.  There is no separate node kind per special form;
`setq`, `prog`, `while` and friends are lists whose head atom names the form,
and every later stage dispatches by looking at that head.

AST nodes carry an optional source line as metadata.  The line never takes
part in equality, so two parses of the same text on different lines compare
equal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Tuple

from flang.flang_error import FLangEvalError
from flang.flang_value import (
    FLangValue, FLangInteger, FLangReal, FLangBoolean, FLangAtom, FLangList, FLangFunction, FLANG_NULL
)


@dataclass(frozen=True)
class FLangASTNode(ABC):
    """
    Abstract base class for all FLang AST nodes.

    All AST nodes are immutable.  The source line is keyword-only and excluded
    from comparisons and hashing.
    """
    line: int | None = field(default=None, kw_only=True, compare=False)

    @abstractmethod
    def to_runtime_value(self) -> FLangValue:
        """Convert the node, unevaluated, into a runtime value (used by quote)."""

    @abstractmethod
    def type_name(self) -> str:
        """Return FLang type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the node as FLang source text."""


@dataclass(frozen=True)
class FLangASTAtom(FLangASTNode):
    """Represents a symbolic atom (identifier or keyword)."""
    name: str

    def to_runtime_value(self) -> FLangAtom:
        return FLangAtom(self.name)

    def type_name(self) -> str:
        return "atom"

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class FLangASTInteger(FLangASTNode):
    """Represents integer literals."""
    value: int

    def to_runtime_value(self) -> FLangInteger:
        return FLangInteger(self.value)

    def type_name(self) -> str:
        return "integer"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FLangASTReal(FLangASTNode):
    """Represents real literals."""
    value: float

    def to_runtime_value(self) -> FLangReal:
        return FLangReal(self.value)

    def type_name(self) -> str:
        return "real"

    def describe(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class FLangASTBoolean(FLangASTNode):
    """Represents boolean literals."""
    value: bool

    def to_runtime_value(self) -> FLangBoolean:
        return FLangBoolean(self.value)

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class FLangASTNull(FLangASTNode):
    """Represents the null literal."""

    def to_runtime_value(self) -> FLangValue:
        return FLANG_NULL

    def type_name(self) -> str:
        return "null"

    def describe(self) -> str:
        return "null"


@dataclass(frozen=True)
class FLangASTList(FLangASTNode):
    """Represents a list: a call, a special form, or quoted data."""
    elements: Tuple[FLangASTNode, ...] = ()

    def to_runtime_value(self) -> FLangList:
        return FLangList(tuple(elem.to_runtime_value() for elem in self.elements))

    def type_name(self) -> str:
        return "list"

    def describe(self) -> str:
        return f"({' '.join(elem.describe() for elem in self.elements)})"

    def is_empty(self) -> bool:
        """Check if the list is empty."""
        return len(self.elements) == 0

    def head_name(self) -> str | None:
        """Return the name of the head atom, or None if the head is not an atom."""
        if self.elements and isinstance(self.elements[0], FLangASTAtom):
            return self.elements[0].name

        return None

    def args(self) -> Tuple[FLangASTNode, ...]:
        """Return every element after the head."""
        return self.elements[1:]


@dataclass(frozen=True)
class FLangNode:
    """A top-level form paired with the 1-based source line it started on."""
    element: FLangASTNode
    line: int

    def describe(self) -> str:
        """Describe the wrapped element."""
        return self.element.describe()


def ast_from_value(value: FLangValue, line: int | None = None) -> FLangASTNode:
    """
    Convert a runtime value back into an AST node (used by eval).

    Args:
        value: Runtime value to convert
        line: Optional source line to attach to the produced nodes

    Returns:
        Equivalent AST node

    Raises:
        FLangEvalError: If the value holds a function, which has no source form
    """
    if isinstance(value, FLangInteger):
        return FLangASTInteger(value.value, line=line)

    if isinstance(value, FLangReal):
        return FLangASTReal(value.value, line=line)

    if isinstance(value, FLangBoolean):
        return FLangASTBoolean(value.value, line=line)

    if isinstance(value, FLangAtom):
        return FLangASTAtom(value.name, line=line)

    if isinstance(value, FLangList):
        return FLangASTList(tuple(ast_from_value(elem, line) for elem in value.elements), line=line)

    if isinstance(value, FLangFunction):
        raise FLangEvalError(
            message="Cannot convert a function value back into an expression",
            received=f"Value: {value.describe()}",
            expected="A list built from atoms, numbers, booleans, null and lists",
            suggestion="Call the function directly instead of building a list around it for eval",
            example="(eval '(plus 1 2)) → 3"
        )

    return FLangASTNull(line=line)
