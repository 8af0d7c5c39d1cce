"""Arithmetic, comparison and logical built-in functions for FLang.

The module-level helpers are shared by the interpreter and the constant
folder so that a folded expression always produces exactly the value the
interpreter would have computed.
"""

import math
import operator
from typing import Callable, Dict, List

from flang.flang_error import FLangEvalError, ErrorMessageBuilder
from flang.flang_value import FLangValue, FLangInteger, FLangReal, FLangBoolean


ARITHMETIC_OPERATORS: Dict[str, Callable[[float, float], float]] = {
    'plus': operator.add,
    'minus': operator.sub,
    'times': operator.mul,
    'divide': operator.truediv,
}

COMPARISON_OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    'less': operator.lt,
    'lesseq': operator.le,
    'greater': operator.gt,
    'greatereq': operator.ge,
    'equal': operator.eq,
    'nonequal': operator.ne,
}

LOGICAL_OPERATORS: Dict[str, Callable[[bool, bool], bool]] = {
    'and': lambda a, b: a and b,
    'or': lambda a, b: a or b,
    'xor': operator.ne,
}


def promote_real(result: float) -> int | float:
    """
    Apply the integer/real promotion rule to a real-precision result.

    A finite result with no fractional part becomes an integer, anything else
    stays real.
    """
    if math.isfinite(result) and result == math.floor(result):
        return int(result)

    return result


def compute_arithmetic(name: str, left: float, right: float) -> int | float:
    """
    Compute a binary arithmetic builtin in real precision and promote the result.

    Raises:
        FLangEvalError: On division by zero
    """
    if name == 'divide' and right == 0:
        raise FLangEvalError(
            message="Division by zero",
            received=f"Divisor: {right!r}",
            suggestion="Check the divisor before dividing, e.g. with cond and nonequal",
            example="(cond (nonequal d 0) (divide n d) 0)"
        )

    return promote_real(ARITHMETIC_OPERATORS[name](left, right))


def compute_comparison(name: str, left: float, right: float) -> bool:
    """Compute a comparison builtin over operands already coerced to reals."""
    return COMPARISON_OPERATORS[name](left, right)


def compute_logical(name: str, left: bool, right: bool) -> bool:
    """Compute a binary logical builtin."""
    return LOGICAL_OPERATORS[name](left, right)


def wrap_number(value: int | float) -> FLangValue:
    """Wrap a promoted Python number in the matching FLang value type."""
    if isinstance(value, int):
        return FLangInteger(value)

    return FLangReal(value)


class FLangMathFunctions:
    """Arithmetic, comparison and logical built-in functions for FLang."""

    def get_functions(self) -> Dict[str, Callable[[List[FLangValue]], FLangValue]]:
        """Return dictionary of function implementations."""
        functions: Dict[str, Callable[[List[FLangValue]], FLangValue]] = {}

        for name in ARITHMETIC_OPERATORS:
            functions[name] = self._make_arithmetic(name)

        for name in COMPARISON_OPERATORS:
            functions[name] = self._make_comparison(name)

        for name in LOGICAL_OPERATORS:
            functions[name] = self._make_logical(name)

        functions['not'] = self._builtin_not
        return functions

    def _make_arithmetic(self, name: str) -> Callable[[List[FLangValue]], FLangValue]:
        def builtin(args: List[FLangValue]) -> FLangValue:
            left = self._ensure_number(args[0], name, 1)
            right = self._ensure_number(args[1], name, 2)
            return wrap_number(compute_arithmetic(name, left, right))

        return builtin

    def _make_comparison(self, name: str) -> Callable[[List[FLangValue]], FLangValue]:
        def builtin(args: List[FLangValue]) -> FLangValue:
            left = self._ensure_number_or_boolean(args[0], name, 1)
            right = self._ensure_number_or_boolean(args[1], name, 2)
            return FLangBoolean(compute_comparison(name, left, right))

        return builtin

    def _make_logical(self, name: str) -> Callable[[List[FLangValue]], FLangValue]:
        def builtin(args: List[FLangValue]) -> FLangValue:
            left = self._ensure_boolean(args[0], name, 1)
            right = self._ensure_boolean(args[1], name, 2)
            return FLangBoolean(compute_logical(name, left, right))

        return builtin

    def _builtin_not(self, args: List[FLangValue]) -> FLangValue:
        """Implement not."""
        return FLangBoolean(not self._ensure_boolean(args[0], 'not', 1))

    def _to_real(self, value: int | float, function_name: str, position: int) -> float:
        """Convert a number to a real, rejecting integers too large to represent."""
        try:
            return float(value)

        except OverflowError:
            raise FLangEvalError(
                message=f"Integer too large for '{function_name}'",
                received=f"Argument {position}: an integer of {int(value).bit_length()} bits",
                expected="A number within the range of a real",
                example=ErrorMessageBuilder.create_function_example(function_name)
            ) from None

    def _ensure_number(self, value: FLangValue, function_name: str, position: int) -> float:
        """Extract a real from an integer or real value."""
        if isinstance(value, (FLangInteger, FLangReal)):
            return self._to_real(value.value, function_name, position)

        raise FLangEvalError(
            message=f"Type mismatch: '{function_name}' requires numeric arguments",
            received=f"Argument {position}: {value.describe()} ({value.type_name()})",
            expected="Integer or real",
            example=ErrorMessageBuilder.create_function_example(function_name)
        )

    def _ensure_number_or_boolean(self, value: FLangValue, function_name: str, position: int) -> float:
        """Extract a real from a number, treating true as 1.0 and false as 0.0."""
        if isinstance(value, FLangBoolean):
            return 1.0 if value.value else 0.0

        if isinstance(value, (FLangInteger, FLangReal)):
            return self._to_real(value.value, function_name, position)

        raise FLangEvalError(
            message=f"Type mismatch: '{function_name}' requires numeric or boolean arguments",
            received=f"Argument {position}: {value.describe()} ({value.type_name()})",
            expected="Integer, real or boolean",
            example=ErrorMessageBuilder.create_function_example(function_name)
        )

    def _ensure_boolean(self, value: FLangValue, function_name: str, position: int) -> bool:
        """Extract a Python bool from a boolean value."""
        if isinstance(value, FLangBoolean):
            return value.value

        raise FLangEvalError(
            message=f"Type mismatch: '{function_name}' requires boolean arguments",
            received=f"Argument {position}: {value.describe()} ({value.type_name()})",
            expected="true or false",
            example=ErrorMessageBuilder.create_function_example(function_name)
        )
