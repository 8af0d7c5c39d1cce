"""FLang Value hierarchy - immutable runtime value types.

These are the values produced by the interpreter.  They carry no source
location metadata; that lives only on the AST nodes in flang_ast.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Tuple


@dataclass(frozen=True)
class FLangValue(ABC):
    """
    Abstract base class for all FLang runtime values.

    All runtime values are immutable.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value."""

    @abstractmethod
    def type_name(self) -> str:
        """Return FLang type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value using FLang source conventions."""


@dataclass(frozen=True)
class FLangInteger(FLangValue):
    """Represents integer values."""
    value: int

    def to_python(self) -> int:
        return self.value

    def type_name(self) -> str:
        return "integer"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FLangReal(FLangValue):
    """Represents real (floating-point) values."""
    value: float

    def to_python(self) -> float:
        return self.value

    def type_name(self) -> str:
        return "real"

    def describe(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class FLangBoolean(FLangValue):
    """Represents boolean values."""
    value: bool

    def to_python(self) -> bool:
        return self.value

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class FLangNull(FLangValue):
    """Represents the null value."""

    def to_python(self) -> None:
        return None

    def type_name(self) -> str:
        return "null"

    def describe(self) -> str:
        return "null"


# Module-level singleton - there is only one null value.
FLANG_NULL = FLangNull()


@dataclass(frozen=True)
class FLangAtom(FLangValue):
    """Represents a quoted symbol."""
    name: str

    def to_python(self) -> str:
        """Atoms convert to their name string."""
        return self.name

    def type_name(self) -> str:
        return "atom"

    def describe(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FLangList(FLangValue):
    """Represents lists of FLang values."""
    elements: Tuple[FLangValue, ...] = ()

    def to_python(self) -> List[Any]:
        """Convert to Python list with Python values."""
        return [elem.to_python() for elem in self.elements]

    def type_name(self) -> str:
        return "list"

    def describe(self) -> str:
        return f"({' '.join(elem.describe() for elem in self.elements)})"

    def length(self) -> int:
        """Return the length of the list."""
        return len(self.elements)

    def is_empty(self) -> bool:
        """Check if the list is empty."""
        return len(self.elements) == 0

    def first(self) -> FLangValue:
        """Get the first element (raises IndexError if empty)."""
        if not self.elements:
            raise IndexError("Cannot get first element of empty list")

        return self.elements[0]

    def rest(self) -> 'FLangList':
        """Get all elements except the first (empty for an empty list)."""
        return FLangList(self.elements[1:])

    def cons(self, element: FLangValue) -> 'FLangList':
        """Prepend an element to the front of the list."""
        return FLangList((element,) + self.elements)


@dataclass(frozen=True, eq=False)
class FLangFunction(FLangValue):
    """
    Represents a user-defined function (func or lambda).

    The parameter names, the unevaluated body and the environment active at the
    definition site are fixed once the function is created.  The environment is
    shared, not copied, so the function sees later changes to captured frames.
    Functions compare by identity.
    """
    parameters: Tuple[str, ...]
    body: Any  # FLangASTNode
    closure_environment: Any = field(repr=False)  # FLangEnvironment, avoiding circular import
    name: str | None = None

    def to_python(self) -> 'FLangFunction':
        """Functions return themselves as Python values."""
        return self

    def type_name(self) -> str:
        return "function"

    def describe(self) -> str:
        if self.name:
            return f"<function {self.name}>"

        return "<function>"
