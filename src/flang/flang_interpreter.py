"""FLang Interpreter - evaluates parsed programs by walking the AST."""

import logging
import sys
from typing import Callable, Dict, List, Sequence

from flang.flang_ast import (
    FLangASTNode, FLangASTAtom, FLangASTInteger, FLangASTReal, FLangASTBoolean, FLangASTNull,
    FLangASTList, FLangNode, ast_from_value
)
from flang.flang_builtin_registry import FLangBuiltinRegistry
from flang.flang_collections import FLangCollectionsFunctions
from flang.flang_environment import FLangEnvironment
from flang.flang_error import FLangEvalError, ErrorMessageBuilder
from flang.flang_math import FLangMathFunctions
from flang.flang_value import FLangValue, FLangBoolean, FLangList, FLangFunction, FLANG_NULL


class FLangControlSignal(Exception):
    """Base class for non-local control transfer inside the interpreter."""


class FLangReturnSignal(FLangControlSignal):
    """Raised by (return ...); caught by the nearest function call or prog."""

    def __init__(self, value: FLangValue):
        super().__init__("return")
        self.value = value


class FLangBreakSignal(FLangControlSignal):
    """Raised by (break); caught by the nearest while."""

    def __init__(self) -> None:
        super().__init__("break")


class FLangInterpreter:
    """
    Tree-walking evaluator for FLang.

    Evaluation is strict and call-by-value, and every multi-argument form
    evaluates its arguments left to right.  The global environment belongs to
    the interpreter, so bindings made by one `interpret` call are visible to
    the next.

    Nesting is tracked explicitly: every step into a sub-expression or a
    function body adds one to the depth, and going past `max_depth` is an
    evaluation error.  The Python recursion limit is raised while a top-level
    node runs so that `max_depth`, not Python, decides how deep programs can
    recurse.
    """

    # Upper bound on Python frames used per level of evaluation depth
    PYTHON_FRAMES_PER_DEPTH = 4

    def __init__(self, max_depth: int = 20000) -> None:
        """
        Initialize the interpreter with an empty global environment.

        Args:
            max_depth: Maximum evaluation depth
        """
        self.max_depth = max_depth
        self.global_env = FLangEnvironment(name="global")
        self._logger = logging.getLogger("FLangInterpreter")

        # Create function modules
        self.math_functions = FLangMathFunctions()
        self.collections_functions = FLangCollectionsFunctions()
        self._builtin_functions = self._create_builtin_functions()

        self._special_forms: Dict[str, Callable[[FLangASTList, FLangEnvironment, int], FLangValue]] = {
            'quote': self._evaluate_quote_form,
            'setq': self._evaluate_setq_form,
            'func': self._evaluate_func_form,
            'lambda': self._evaluate_lambda_form,
            'prog': self._evaluate_prog_form,
            'cond': self._evaluate_cond_form,
            'while': self._evaluate_while_form,
            'return': self._evaluate_return_form,
            'break': self._evaluate_break_form,
        }

    def _create_builtin_functions(self) -> Dict[str, Callable[[List[FLangValue]], FLangValue]]:
        """Collect the native implementations of every builtin except eval."""
        builtins: Dict[str, Callable[[List[FLangValue]], FLangValue]] = {}
        builtins.update(self.math_functions.get_functions())
        builtins.update(self.collections_functions.get_functions())
        return builtins

    def interpret(self, nodes: Sequence[FLangNode]) -> List[FLangValue]:
        """
        Evaluate every top-level node in the global environment.

        Args:
            nodes: Top-level nodes, in program order

        Returns:
            One value per node

        Raises:
            FLangEvalError: On the first runtime error; later nodes are not evaluated
        """
        self._logger.debug("interpreting %d node(s)", len(nodes))
        return [self.evaluate_node(node) for node in nodes]

    def evaluate_node(self, node: FLangNode) -> FLangValue:
        """
        Evaluate one top-level node, turning every failure into an FLangEvalError.

        Args:
            node: Node to evaluate

        Returns:
            The node's value

        Raises:
            FLangEvalError: If evaluation fails
        """
        old_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(old_limit + self.max_depth * self.PYTHON_FRAMES_PER_DEPTH)
        try:
            return self.evaluate(node.element, self.global_env)

        except FLangReturnSignal:
            raise FLangEvalError(
                message="return used outside of prog or function",
                suggestion="Only use return inside a prog block or a function body",
                example=ErrorMessageBuilder.create_function_example('return'),
                line=node.line
            ) from None

        except FLangBreakSignal:
            raise FLangEvalError(
                message="break used outside of while",
                suggestion="Only use break inside the body of a while loop",
                example=ErrorMessageBuilder.create_function_example('break'),
                line=node.line
            ) from None

        except FLangEvalError as e:
            if e.line is not None:
                raise

            # Attach the line of the top-level form that failed
            raise FLangEvalError(
                message=e.message,
                context=e.context,
                expected=e.expected,
                received=e.received,
                suggestion=e.suggestion,
                example=e.example,
                line=node.line
            ) from e

        except RecursionError as e:
            raise FLangEvalError(
                message="Maximum recursion depth exceeded",
                context=f"While evaluating: {node.describe()}",
                suggestion="Check that recursive functions have a reachable base case",
                line=node.line
            ) from e

        except Exception as e:
            # Wrap other exceptions with context
            raise FLangEvalError(
                message=f"Unexpected error during evaluation: {e}",
                context=f"While evaluating: {node.describe()}",
                suggestion="This is an internal error - please report this issue",
                line=node.line
            ) from e

        finally:
            sys.setrecursionlimit(old_limit)

    def evaluate(self, element: FLangASTNode, env: FLangEnvironment, depth: int = 0) -> FLangValue:
        """
        Evaluate an element in an environment.

        Args:
            element: Element to evaluate
            env: Environment for variable lookups and bindings
            depth: Current evaluation depth

        Returns:
            Evaluation result

        Raises:
            FLangEvalError: If evaluation fails
            FLangControlSignal: For return and break, until something catches them
        """
        if depth > self.max_depth:
            raise FLangEvalError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                context=f"While evaluating: {element.describe()}",
                suggestion="Check that recursive functions have a reachable base case, or increase max_depth"
            )

        if isinstance(element, (FLangASTInteger, FLangASTReal, FLangASTBoolean, FLangASTNull)):
            return element.to_runtime_value()

        if isinstance(element, FLangASTAtom):
            return env.lookup(element.name)

        assert isinstance(element, FLangASTList)
        if element.is_empty():
            return FLANG_NULL

        first = element.elements[0]
        if isinstance(first, FLangASTAtom):
            handler = self._special_forms.get(first.name)
            if handler is not None:
                return handler(element, env, depth)

            return self._call_named_function(first.name, element.args(), env, depth)

        # Computed callee, e.g. ((lambda (x) x) 1) or ((make-adder 1) 2)
        func = self.evaluate(first, env, depth + 1)
        if not isinstance(func, FLangFunction):
            raise FLangEvalError(
                message="Cannot call non-function value",
                received=f"Head evaluated to: {func.describe()} ({func.type_name()})",
                expected="An expression that evaluates to a function",
                example="((lambda (x) (times x x)) 4) → 16"
            )

        args = [self.evaluate(arg, env, depth + 1) for arg in element.args()]
        return self._apply_function(func, args, depth)

    def _call_named_function(
        self,
        name: str,
        arg_exprs: Sequence[FLangASTNode],
        env: FLangEnvironment,
        depth: int
    ) -> FLangValue:
        """
        Call the function named by a head atom.

        A function value bound to the name wins, then a builtin of that name.
        A non-function binding never hides a builtin.
        """
        args = [self.evaluate(arg, env, depth + 1) for arg in arg_exprs]

        bound = env.find(name)
        if isinstance(bound, FLangFunction):
            return self._apply_function(bound, args, depth)

        spec = FLangBuiltinRegistry.get_spec(name)
        if spec is not None:
            if len(args) != spec.arity:
                raise FLangEvalError(
                    message=f"Function '{name}' expects {spec.arity} argument(s), got {len(args)}",
                    received=f"Arguments provided: {' '.join(arg.describe() for arg in args) or '(none)'}",
                    example=ErrorMessageBuilder.create_function_example(name)
                )

            if name == 'eval':
                return self._builtin_eval(args[0], env, depth)

            return self._call_builtin_function(name, args)

        if bound is not None:
            raise FLangEvalError(
                message=f"'{name}' is not a function",
                received=f"'{name}' is bound to {bound.describe()} ({bound.type_name()})",
                expected="A function defined with func or lambda, or a builtin"
            )

        similar = ErrorMessageBuilder.suggest_similar_names(
            name, env.get_available_bindings() + list(FLangBuiltinRegistry.SPECS)
        )
        raise FLangEvalError(
            message=f"Undefined function '{name}'",
            suggestion=f"Did you mean: {', '.join(similar)}?" if similar
                else f"Define it first with (func {name} (params) body)",
            example=ErrorMessageBuilder.create_function_example('func')
        )

    def _call_builtin_function(self, name: str, args: List[FLangValue]) -> FLangValue:
        """Call a builtin's native implementation."""
        try:
            return self._builtin_functions[name](args)

        except FLangEvalError:
            # Re-raise FLang errors as-is
            raise

        except Exception as e:
            # Wrap other exceptions with context
            raise FLangEvalError(
                message=f"Error in built-in function '{name}'",
                context=str(e),
                suggestion="This is an internal error - please report this issue"
            ) from e

    def _builtin_eval(self, value: FLangValue, env: FLangEnvironment, depth: int) -> FLangValue:
        """Implement eval: lists are run as code in the current environment."""
        if not isinstance(value, FLangList):
            return value

        return self.evaluate(ast_from_value(value), env, depth + 1)

    def _apply_function(self, func: FLangFunction, args: List[FLangValue], depth: int) -> FLangValue:
        """
        Apply a user function to already-evaluated arguments.

        The call gets one new environment whose parent is the closure
        environment, not the caller's.
        """
        if len(args) != len(func.parameters):
            label = func.name or "<lambda>"
            raise FLangEvalError(
                message=f"Function '{label}' expects {len(func.parameters)} argument(s), got {len(args)}",
                received=f"Arguments provided: {' '.join(arg.describe() for arg in args) or '(none)'}",
                expected=f"Parameters expected: {' '.join(func.parameters) or '(none)'}",
                suggestion=f"Provide exactly {len(func.parameters)} argument{'s' if len(func.parameters) != 1 else ''}"
            )

        call_env = FLangEnvironment(parent=func.closure_environment, name=f"{func.name or 'lambda'}-call")
        for param, arg in zip(func.parameters, args):
            call_env.define(param, arg)

        try:
            return self.evaluate(func.body, call_env, depth + 1)

        except FLangReturnSignal as signal:
            return signal.value

        except FLangBreakSignal:
            raise FLangEvalError(
                message="break used outside of while",
                context=f"break escaped the body of {func.describe()}",
                suggestion="Only use break inside the body of a while loop",
                example=ErrorMessageBuilder.create_function_example('break')
            ) from None

    def _malformed(self, form: str, expected: str, element: FLangASTList) -> FLangEvalError:
        return FLangEvalError(
            message=f"Malformed {form} form",
            received=element.describe(),
            expected=expected,
            example=ErrorMessageBuilder.create_function_example(form),
            line=element.line
        )

    def _parameter_names(self, form: str, params: FLangASTNode, element: FLangASTList) -> tuple[str, ...]:
        """Extract a parameter or locals list, which must hold only atoms."""
        if not isinstance(params, FLangASTList) or not all(isinstance(p, FLangASTAtom) for p in params.elements):
            raise self._malformed(form, "A list of atoms", element)

        return tuple(p.name for p in params.elements if isinstance(p, FLangASTAtom))

    def _evaluate_quote_form(self, element: FLangASTList, _env: FLangEnvironment, _depth: int) -> FLangValue:
        """Evaluate (quote expr): the expression itself, unevaluated."""
        if len(element.elements) != 2:
            raise self._malformed("quote", "(quote expr)", element)

        return element.elements[1].to_runtime_value()

    def _evaluate_setq_form(self, element: FLangASTList, env: FLangEnvironment, depth: int) -> FLangValue:
        """Evaluate (setq name value), binding in the current environment."""
        if len(element.elements) != 3 or not isinstance(element.elements[1], FLangASTAtom):
            raise self._malformed("setq", "(setq name value)", element)

        value = self.evaluate(element.elements[2], env, depth + 1)
        env.define(element.elements[1].name, value)
        return value

    def _evaluate_func_form(self, element: FLangASTList, env: FLangEnvironment, _depth: int) -> FLangValue:
        """Evaluate (func name (params) body), binding the function in the defining environment."""
        if len(element.elements) != 4 or not isinstance(element.elements[1], FLangASTAtom):
            raise self._malformed("func", "(func name (params) body)", element)

        name = element.elements[1].name
        params = self._parameter_names("func", element.elements[2], element)
        func = FLangFunction(params, element.elements[3], env, name)
        env.define(name, func)
        return func

    def _evaluate_lambda_form(self, element: FLangASTList, env: FLangEnvironment, _depth: int) -> FLangValue:
        """Evaluate (lambda (params) body) to an anonymous closure."""
        if len(element.elements) != 3:
            raise self._malformed("lambda", "(lambda (params) body)", element)

        params = self._parameter_names("lambda", element.elements[1], element)
        return FLangFunction(params, element.elements[2], env)

    def _evaluate_prog_form(self, element: FLangASTList, env: FLangEnvironment, depth: int) -> FLangValue:
        """Evaluate (prog (locals) forms...) in a fresh child environment."""
        if len(element.elements) < 2:
            raise self._malformed("prog", "(prog (locals) forms...)", element)

        local_names = self._parameter_names("prog", element.elements[1], element)
        prog_env = FLangEnvironment(parent=env, name="prog")
        for name in local_names:
            prog_env.define(name, FLANG_NULL)

        result: FLangValue = FLANG_NULL
        for form in element.elements[2:]:
            try:
                result = self.evaluate(form, prog_env, depth + 1)

            except FLangReturnSignal as signal:
                return signal.value

        return result

    def _ensure_condition(self, form: str, value: FLangValue) -> bool:
        if isinstance(value, FLangBoolean):
            return value.value

        raise FLangEvalError(
            message=f"{form} condition must be a boolean",
            received=f"Condition value: {value.describe()} ({value.type_name()})",
            expected="true or false",
            example=ErrorMessageBuilder.create_function_example(form)
        )

    def _evaluate_cond_form(self, element: FLangASTList, env: FLangEnvironment, depth: int) -> FLangValue:
        """Evaluate (cond test then [else])."""
        if len(element.elements) not in (3, 4):
            raise self._malformed("cond", "(cond test then [else])", element)

        if self._ensure_condition("cond", self.evaluate(element.elements[1], env, depth + 1)):
            return self.evaluate(element.elements[2], env, depth + 1)

        if len(element.elements) == 4:
            return self.evaluate(element.elements[3], env, depth + 1)

        return FLANG_NULL

    def _evaluate_while_form(self, element: FLangASTList, env: FLangEnvironment, depth: int) -> FLangValue:
        """Evaluate (while test forms...) in the enclosing environment."""
        if len(element.elements) < 2:
            raise self._malformed("while", "(while test forms...)", element)

        condition = element.elements[1]
        body = element.elements[2:]

        result: FLangValue = FLANG_NULL
        while self._ensure_condition("while", self.evaluate(condition, env, depth + 1)):
            for form in body:
                try:
                    result = self.evaluate(form, env, depth + 1)

                except FLangBreakSignal:
                    return FLANG_NULL

        return result

    def _evaluate_return_form(self, element: FLangASTList, env: FLangEnvironment, depth: int) -> FLangValue:
        """Evaluate (return [value]) by raising a return signal."""
        if len(element.elements) > 2:
            raise self._malformed("return", "(return [value])", element)

        value = self.evaluate(element.elements[1], env, depth + 1) if len(element.elements) == 2 else FLANG_NULL
        raise FLangReturnSignal(value)

    def _evaluate_break_form(self, element: FLangASTList, _env: FLangEnvironment, _depth: int) -> FLangValue:
        """Evaluate (break) by raising a break signal."""
        if len(element.elements) != 1:
            raise self._malformed("break", "(break)", element)

        raise FLangBreakSignal()
