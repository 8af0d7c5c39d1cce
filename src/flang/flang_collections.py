"""List primitives and type predicates for FLang."""

from typing import Callable, Dict, List

from flang.flang_error import FLangEvalError, ErrorMessageBuilder
from flang.flang_value import (
    FLangValue, FLangInteger, FLangReal, FLangBoolean, FLangNull, FLangAtom, FLangList
)


class FLangCollectionsFunctions:
    """List manipulation and type predicate built-in functions."""

    def get_functions(self) -> Dict[str, Callable[[List[FLangValue]], FLangValue]]:
        """Return dictionary of function implementations."""
        return {
            'head': self._builtin_head,
            'tail': self._builtin_tail,
            'cons': self._builtin_cons,
            'isint': self._builtin_isint,
            'isreal': self._builtin_isreal,
            'isbool': self._builtin_isbool,
            'isnull': self._builtin_isnull,
            'isatom': self._builtin_isatom,
            'islist': self._builtin_islist,
        }

    def _builtin_head(self, args: List[FLangValue]) -> FLangValue:
        """Implement head: first element of a non-empty list."""
        lst = self._ensure_list(args[0], 'head')
        if lst.is_empty():
            raise FLangEvalError(
                message="Cannot get head of empty list",
                received="Empty list: ()",
                suggestion="Check the list with islist or compare it before taking its head",
                example=ErrorMessageBuilder.create_function_example('head')
            )

        return lst.first()

    def _builtin_tail(self, args: List[FLangValue]) -> FLangValue:
        """Implement tail: every element but the first, empty for an empty list."""
        return self._ensure_list(args[0], 'tail').rest()

    def _builtin_cons(self, args: List[FLangValue]) -> FLangValue:
        """Implement cons: prepend an element to a list."""
        lst = self._ensure_list(args[1], 'cons', position=2)
        return lst.cons(args[0])

    def _builtin_isint(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangInteger))

    def _builtin_isreal(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangReal))

    def _builtin_isbool(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangBoolean))

    def _builtin_isnull(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangNull))

    def _builtin_isatom(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangAtom))

    def _builtin_islist(self, args: List[FLangValue]) -> FLangValue:
        return FLangBoolean(isinstance(args[0], FLangList))

    def _ensure_list(self, value: FLangValue, function_name: str, position: int = 1) -> FLangList:
        """Ensure a value is a list, raising a type error otherwise."""
        if isinstance(value, FLangList):
            return value

        raise FLangEvalError(
            message=f"Type mismatch: '{function_name}' requires a list",
            received=f"Argument {position}: {value.describe()} ({value.type_name()})",
            expected="List",
            example=ErrorMessageBuilder.create_function_example(function_name)
        )
