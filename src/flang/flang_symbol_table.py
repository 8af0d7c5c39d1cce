"""Symbol table for the FLang semantic analyzer.

Each table is one lexical scope frame.  It records the inferred type of every
variable bound in the scope and the parameter list and body of every function
defined there, and links to the enclosing frame.
"""

from enum import Enum
from typing import Dict, Set, Tuple

from flang.flang_ast import FLangASTNode


class FLangType(Enum):
    """Static type tags used by the analyzer's type inference."""
    NUMBER = "number"
    BOOL = "bool"
    ANY = "any"
    NULL = "null"
    LIST = "list"

    def __str__(self) -> str:
        return self.value


class FLangSymbolTable:
    """
    A mutable scope frame: variable types, function signatures and a parent link.

    Lookups walk the parent chain.  The walk tracks the frames it has visited
    so a chain that loops back on itself ends the search instead of spinning.
    """

    def __init__(self, parent: 'FLangSymbolTable | None' = None):
        """
        Initialize an empty scope.

        Args:
            parent: Enclosing scope, or None for the global scope
        """
        self.variables: Dict[str, FLangType] = {}
        self.functions: Dict[str, Tuple[Tuple[str, ...], FLangASTNode]] = {}
        self.parent = parent

    def define_variable(self, name: str, var_type: FLangType = FLangType.ANY) -> None:
        """Record a variable and its inferred type, overwriting any earlier entry."""
        self.variables[name] = var_type

    def lookup_variable_type(self, name: str) -> FLangType | None:
        """
        Find the type of a variable in this scope or its parents.

        Returns:
            The recorded type, or None if the variable is unknown
        """
        visited: Set[int] = set()
        table: FLangSymbolTable | None = self
        while table is not None:
            if id(table) in visited:
                return None

            visited.add(id(table))
            if name in table.variables:
                return table.variables[name]

            table = table.parent

        return None

    def is_variable_defined(self, name: str) -> bool:
        """Check if a variable is visible from this scope."""
        return self.lookup_variable_type(name) is not None

    def define_function(self, name: str, params: Tuple[str, ...], body: FLangASTNode) -> None:
        """Record a function's parameter names and body."""
        self.functions[name] = (params, body)

    def lookup_function(self, name: str) -> Tuple[Tuple[str, ...], FLangASTNode] | None:
        """
        Find a function in this scope or its parents.

        Returns:
            Tuple of (parameter names, body), or None if the function is unknown
        """
        visited: Set[int] = set()
        table: FLangSymbolTable | None = self
        while table is not None:
            if id(table) in visited:
                return None

            visited.add(id(table))
            if name in table.functions:
                return table.functions[name]

            table = table.parent

        return None

    def __repr__(self) -> str:
        """Human-readable representation."""
        return f"FLangSymbolTable(variables={list(self.variables)}, functions={list(self.functions)})"
