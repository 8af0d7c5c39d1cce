"""
Builtin function specifications for FLang.

This module is the single source of truth for what builtins exist, how many
arguments each takes, what argument types the analyzer expects and what type
each returns.  The semantic analyzer checks calls against these specs and the
interpreter enforces the arity before dispatching.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from flang.flang_symbol_table import FLangType


@dataclass(frozen=True)
class FLangBuiltinSpec:
    """Static description of a builtin function."""
    name: str
    arity: int
    arg_types: Tuple[FLangType, ...] | None
    return_type: FLangType


_N = FLangType.NUMBER
_B = FLangType.BOOL
_A = FLangType.ANY
_L = FLangType.LIST


class FLangBuiltinRegistry:
    """Registry of builtin specs and the special-form names."""

    SPECIAL_FORMS: FrozenSet[str] = frozenset({
        "quote", "setq", "func", "lambda", "prog", "cond", "while", "return", "break",
    })

    ARITHMETIC = ("plus", "minus", "times", "divide")
    ORDERING = ("less", "lesseq", "greater", "greatereq")
    EQUALITY = ("equal", "nonequal")
    LOGICAL = ("and", "or", "xor", "not")
    PREDICATES = ("isint", "isreal", "isbool", "isnull", "isatom", "islist")

    SPECS: Dict[str, FLangBuiltinSpec] = {
        spec.name: spec for spec in (
            # Arithmetic
            FLangBuiltinSpec("plus", 2, (_N, _N), _N),
            FLangBuiltinSpec("minus", 2, (_N, _N), _N),
            FLangBuiltinSpec("times", 2, (_N, _N), _N),
            FLangBuiltinSpec("divide", 2, (_N, _N), _N),

            # Comparisons accept numbers or booleans
            FLangBuiltinSpec("less", 2, (_A, _A), _B),
            FLangBuiltinSpec("lesseq", 2, (_A, _A), _B),
            FLangBuiltinSpec("greater", 2, (_A, _A), _B),
            FLangBuiltinSpec("greatereq", 2, (_A, _A), _B),
            FLangBuiltinSpec("equal", 2, None, _B),
            FLangBuiltinSpec("nonequal", 2, None, _B),

            # Lists
            FLangBuiltinSpec("head", 1, (_L,), _A),
            FLangBuiltinSpec("tail", 1, (_L,), _L),
            FLangBuiltinSpec("cons", 2, (_A, _L), _L),

            # Logic
            FLangBuiltinSpec("and", 2, (_B, _B), _B),
            FLangBuiltinSpec("or", 2, (_B, _B), _B),
            FLangBuiltinSpec("xor", 2, (_B, _B), _B),
            FLangBuiltinSpec("not", 1, (_B,), _B),

            # Predicates
            FLangBuiltinSpec("isint", 1, None, _B),
            FLangBuiltinSpec("isreal", 1, None, _B),
            FLangBuiltinSpec("isbool", 1, None, _B),
            FLangBuiltinSpec("isnull", 1, None, _B),
            FLangBuiltinSpec("isatom", 1, None, _B),
            FLangBuiltinSpec("islist", 1, None, _B),

            FLangBuiltinSpec("eval", 1, None, _A),
        )
    }

    @classmethod
    def is_builtin(cls, name: str) -> bool:
        """Check if a name is a builtin function."""
        return name in cls.SPECS

    @classmethod
    def is_special_form(cls, name: str) -> bool:
        """Check if a name is a special form."""
        return name in cls.SPECIAL_FORMS

    @classmethod
    def is_builtin_symbol(cls, name: str) -> bool:
        """Check if a name is any predefined symbol (special form or builtin)."""
        return name in cls.SPECIAL_FORMS or name in cls.SPECS

    @classmethod
    def get_spec(cls, name: str) -> FLangBuiltinSpec | None:
        """Get the spec for a builtin, or None if the name is not a builtin."""
        return cls.SPECS.get(name)
