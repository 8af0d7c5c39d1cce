"""Runtime environments for FLang variable and function scoping."""

from typing import Dict, List

from flang.flang_error import FLangEvalError, ErrorMessageBuilder
from flang.flang_value import FLangValue


class FLangEnvironment:
    """
    Mutable scope frame for runtime bindings with lexical scoping.

    A fresh environment is created for the global level, for every prog block
    and for every function call.  Environments are shared by reference: any
    closure created inside one keeps it alive and sees later updates to it.
    """

    def __init__(self, parent: 'FLangEnvironment | None' = None, name: str = "anonymous"):
        """
        Initialize an empty environment.

        Args:
            parent: Enclosing environment, or None for the global environment
            name: Descriptive name used in debugging output
        """
        self.bindings: Dict[str, FLangValue] = {}
        self.parent = parent
        self.name = name

    def define(self, name: str, value: FLangValue) -> None:
        """
        Bind a name in this environment, shadowing any outer binding.

        Args:
            name: Variable name
            value: Value to bind
        """
        self.bindings[name] = value

    def find(self, name: str) -> FLangValue | None:
        """
        Look up a name in this environment or its parents.

        Args:
            name: Variable name to look up

        Returns:
            The bound value, or None if the name is not bound anywhere
        """
        env: FLangEnvironment | None = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]

            env = env.parent

        return None

    def lookup(self, name: str) -> FLangValue:
        """
        Look up a name, failing if it is not bound.

        Args:
            name: Variable name to look up

        Returns:
            The bound value

        Raises:
            FLangEvalError: If the name is not bound in any enclosing scope
        """
        value = self.find(name)
        if value is not None:
            return value

        similar = ErrorMessageBuilder.suggest_similar_names(name, self.get_available_bindings())
        raise FLangEvalError(
            message=f"Undefined atom: '{name}'",
            suggestion=f"Did you mean: {', '.join(similar)}?" if similar
                else f"Bind '{name}' with setq before using it, or quote it: '{name}",
            example=f"(setq {name} 5)"
        )

    def has_binding(self, name: str) -> bool:
        """Check if a name is bound in this environment or its parents."""
        return self.find(name) is not None

    def get_available_bindings(self) -> List[str]:
        """Get all binding names visible from this environment."""
        available: List[str] = []
        env: FLangEnvironment | None = self
        while env is not None:
            available.extend(env.bindings.keys())
            env = env.parent

        return available

    def __repr__(self) -> str:
        """String representation for debugging."""
        parent_info = f" (parent: {self.parent.name})" if self.parent else ""
        return f"FLangEnvironment({self.name}: {list(self.bindings.keys())}{parent_info})"
