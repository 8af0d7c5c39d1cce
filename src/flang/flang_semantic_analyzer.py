"""FLang Semantic Analyzer - scope-aware checks and lightweight type inference.

This module validates a parsed program before it is interpreted.  It checks:
- Identifiers and callees are declared (builtins, variables or functions)
- Special form shapes (argument counts, atom targets, parameter lists)
- Builtin and user function arity
- Builtin argument types, using a conservative static type inference
- return and break only appear where something can catch them

The analyzer is advisory.  It never raises for user programs, never stops at
the first problem and never changes the AST; it returns every diagnostic it
finds and leaves the decision to run the program to the caller.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Sequence

from flang.flang_ast import (
    FLangASTNode, FLangASTAtom, FLangASTInteger, FLangASTReal, FLangASTBoolean, FLangASTNull,
    FLangASTList, FLangNode
)
from flang.flang_builtin_registry import FLangBuiltinRegistry
from flang.flang_error import FLangDiagnostic
from flang.flang_symbol_table import FLangSymbolTable, FLangType


@dataclass(frozen=True)
class FLangAnalysisContext:
    """Which enclosing constructs can catch a return or break at this point."""
    in_prog: bool = False
    in_while: bool = False
    in_func: bool = False


class FLangSemanticAnalyzer:
    """
    Validates FLang programs and reports problems as diagnostics.

    One global symbol table is extended with a child scope for every func and
    lambda body and every prog block.  Functions are registered before their
    bodies are analyzed, so they are visible to themselves and to every later
    sibling form.
    """

    # Beyond this nesting, inference gives up and answers 'any'
    MAX_INFERENCE_DEPTH = 10

    COMPARISON_TYPES = (FLangType.NUMBER, FLangType.BOOL, FLangType.ANY)

    def __init__(self) -> None:
        """Initialize the semantic analyzer."""
        self.diagnostics: List[FLangDiagnostic] = []
        self.global_scope = FLangSymbolTable()
        self._logger = logging.getLogger("FLangSemanticAnalyzer")

    def analyze(self, nodes: Sequence[FLangNode]) -> List[FLangDiagnostic]:
        """
        Analyze a whole program.

        Args:
            nodes: Top-level nodes from the parser (or the optimizer)

        Returns:
            Every diagnostic found, in the order the problems were visited
        """
        self.diagnostics = []
        self.global_scope = FLangSymbolTable()

        for node in nodes:
            self._analyze_element(node.element, self.global_scope, node.line, FLangAnalysisContext())

        self._logger.debug("analyzed %d node(s), %d diagnostic(s)", len(nodes), len(self.diagnostics))
        return list(self.diagnostics)

    def infer_type(self, element: FLangASTNode, scope: FLangSymbolTable | None = None, depth: int = 0) -> FLangType:
        """
        Infer the static type of an element, best effort.

        Args:
            element: Element to inspect
            scope: Scope to resolve atoms and function names in
            depth: Current nesting depth of the inference

        Returns:
            The inferred type, 'any' when nothing better is known
        """
        if depth > self.MAX_INFERENCE_DEPTH:
            return FLangType.ANY

        if isinstance(element, (FLangASTInteger, FLangASTReal)):
            return FLangType.NUMBER

        if isinstance(element, FLangASTBoolean):
            return FLangType.BOOL

        if isinstance(element, FLangASTNull):
            return FLangType.NULL

        if isinstance(element, FLangASTAtom):
            if scope is not None:
                var_type = scope.lookup_variable_type(element.name)
                if var_type is not None:
                    return var_type

            return FLangType.ANY

        assert isinstance(element, FLangASTList)
        if element.is_empty():
            return FLangType.LIST

        head = element.head_name()
        if head is None:
            return FLangType.ANY

        if head == 'quote':
            return FLangType.LIST

        if head == 'setq':
            if len(element.elements) == 3:
                return self.infer_type(element.elements[2], scope, depth + 1)

            return FLangType.ANY

        if head == 'cond':
            if len(element.elements) == 4:
                then_type = self.infer_type(element.elements[2], scope, depth + 1)
                else_type = self.infer_type(element.elements[3], scope, depth + 1)
                if then_type == else_type:
                    return then_type

            return FLangType.ANY

        if FLangBuiltinRegistry.is_special_form(head):
            return FLangType.ANY

        # A user function under a builtin's name is what actually gets called
        if scope is not None and scope.lookup_function(head) is not None:
            return FLangType.ANY

        spec = FLangBuiltinRegistry.get_spec(head)
        if spec is not None:
            return spec.return_type

        return FLangType.ANY

    def _record(self, message: str, line: int) -> None:
        self.diagnostics.append(FLangDiagnostic(line, message))

    def _line_of(self, element: FLangASTNode, line: int) -> int:
        """Use the element's own line when it has one."""
        return element.line if element.line is not None else line

    def _analyze_element(
        self,
        element: FLangASTNode,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Analyze one element and everything inside it."""
        line = self._line_of(element, line)

        if isinstance(element, FLangASTAtom):
            self._analyze_atom(element, scope, line)
            return

        # Literals need no checking
        if not isinstance(element, FLangASTList) or element.is_empty():
            return

        first = element.elements[0]

        # ((lambda (params) body) args...)
        if isinstance(first, FLangASTList) and first.head_name() == 'lambda':
            self._analyze_anonymous_call(element, first, scope, line, context)
            return

        if not isinstance(first, FLangASTAtom):
            # Computed callee: analyze every part
            for elem in element.elements:
                self._analyze_element(elem, scope, line, context)

            return

        head = first.name
        if head == 'quote':
            self._analyze_quote(element, line)

        elif head == 'setq':
            self._analyze_setq(element, scope, line, context)

        elif head == 'func':
            self._analyze_func(element, scope, line)

        elif head == 'lambda':
            self._analyze_lambda(element, scope, line)

        elif head == 'prog':
            self._analyze_prog(element, scope, line, context)

        elif head == 'cond':
            self._analyze_cond(element, scope, line, context)

        elif head == 'while':
            self._analyze_while(element, scope, line, context)

        elif head == 'return':
            self._analyze_return(element, scope, line, context)

        elif head == 'break':
            self._analyze_break(element, line, context)

        else:
            self._analyze_call(element, head, scope, line, context)

    def _analyze_atom(self, atom: FLangASTAtom, scope: FLangSymbolTable, line: int) -> None:
        name = atom.name
        if FLangBuiltinRegistry.is_builtin_symbol(name):
            return

        if scope.is_variable_defined(name) or scope.lookup_function(name) is not None:
            return

        self._record(f"Undeclared identifier '{name}'", line)

    def _analyze_quote(self, element: FLangASTList, line: int) -> None:
        """Validate (quote expr); the quoted data itself is never analyzed."""
        if len(element.elements) != 2:
            self._record(f"quote requires exactly 1 argument, got {len(element.elements) - 1}", line)

    def _analyze_setq(
        self,
        element: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate (setq name value) and record the name's inferred type."""
        if len(element.elements) != 3:
            self._record(f"setq requires exactly 2 arguments, got {len(element.elements) - 1}", line)
            return

        _, target, value = element.elements
        if not isinstance(target, FLangASTAtom):
            self._record("first argument of setq must be an atom", line)
            return

        self._analyze_element(value, scope, line, context)
        scope.define_variable(target.name, self.infer_type(value, scope))

    def _collect_params(self, params: FLangASTList, form: str, line: int) -> List[str]:
        """Return the atom names in a parameter list, reporting anything else."""
        names: List[str] = []
        for param in params.elements:
            if isinstance(param, FLangASTAtom):
                names.append(param.name)
                continue

            self._record(f"{form} parameter must be an atom, got {param.describe()}", line)

        return names

    def _function_scope(self, parent: FLangSymbolTable, params: List[str]) -> FLangSymbolTable:
        scope = FLangSymbolTable(parent)
        for param in params:
            scope.define_variable(param, FLangType.ANY)

        return scope

    def _analyze_func(self, element: FLangASTList, scope: FLangSymbolTable, line: int) -> None:
        """Validate (func name (params) body) and register the function."""
        if len(element.elements) != 4:
            self._record(f"func requires exactly 3 arguments, got {len(element.elements) - 1}", line)
            return

        _, name, params, body = element.elements
        if not isinstance(name, FLangASTAtom):
            self._record("first argument of func must be an atom", line)
            return

        if not isinstance(params, FLangASTList):
            self._record("second argument of func must be a list of parameters", line)
            return

        param_names = self._collect_params(params, "func", line)

        # Register first so the body can call itself
        scope.define_function(name.name, tuple(param_names), body)

        body_scope = self._function_scope(scope, param_names)
        self._analyze_element(body, body_scope, line, FLangAnalysisContext(in_func=True))

    def _analyze_lambda(self, element: FLangASTList, scope: FLangSymbolTable, line: int) -> None:
        """Validate (lambda (params) body)."""
        if len(element.elements) != 3:
            self._record(f"lambda requires exactly 2 arguments, got {len(element.elements) - 1}", line)
            return

        _, params, body = element.elements
        if not isinstance(params, FLangASTList):
            self._record("first argument of lambda must be a list of parameters", line)
            return

        param_names = self._collect_params(params, "lambda", line)
        body_scope = self._function_scope(scope, param_names)
        self._analyze_element(body, body_scope, line, FLangAnalysisContext(in_func=True))

    def _analyze_anonymous_call(
        self,
        element: FLangASTList,
        lambda_expr: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate ((lambda (params) body) args...)."""
        if len(lambda_expr.elements) != 3:
            self._record("lambda must have exactly 2 arguments (parameters and body)", line)
            return

        _, params, body = lambda_expr.elements
        if not isinstance(params, FLangASTList):
            self._record("lambda parameters must be a list", line)
            return

        param_names = self._collect_params(params, "lambda", line)
        args = element.args()
        if len(param_names) != len(args):
            self._record(f"anonymous lambda expects {len(param_names)} argument(s), got {len(args)}", line)

        for arg in args:
            self._analyze_element(arg, scope, line, context)

        body_scope = self._function_scope(scope, param_names)
        self._analyze_element(body, body_scope, self._line_of(lambda_expr, line), FLangAnalysisContext(in_func=True))

    def _analyze_prog(
        self,
        element: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate (prog (locals) forms...)."""
        if len(element.elements) < 3:
            self._record("prog requires a list of locals and at least one body form", line)
            return

        locals_list = element.elements[1]
        if not isinstance(locals_list, FLangASTList):
            self._record("first argument of prog must be a list of local variables", line)
            return

        local_scope = FLangSymbolTable(scope)
        for local in locals_list.elements:
            if isinstance(local, FLangASTAtom):
                local_scope.define_variable(local.name, FLangType.ANY)
                continue

            self._record(f"prog local variable must be an atom, got {local.describe()}", line)

        # A break inside prog still reaches an enclosing while
        body_context = replace(context, in_prog=True)
        for form in element.elements[2:]:
            self._analyze_element(form, local_scope, line, body_context)

    def _check_condition(self, form: str, condition: FLangASTNode, scope: FLangSymbolTable, line: int) -> None:
        cond_type = self.infer_type(condition, scope)
        if cond_type not in (FLangType.BOOL, FLangType.ANY):
            self._record(f"{form} expects a boolean condition, got {cond_type}", self._line_of(condition, line))

    def _analyze_cond(
        self,
        element: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate (cond test then [else])."""
        if len(element.elements) not in (3, 4):
            self._record(f"cond requires 2 or 3 arguments, got {len(element.elements) - 1}", line)
            return

        condition = element.elements[1]
        self._analyze_element(condition, scope, line, context)
        self._check_condition("cond", condition, scope, line)

        for branch in element.elements[2:]:
            self._analyze_element(branch, scope, line, context)

    def _analyze_while(
        self,
        element: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate (while test forms...)."""
        if len(element.elements) < 3:
            self._record(f"while requires at least 2 arguments, got {len(element.elements) - 1}", line)
            return

        condition = element.elements[1]
        self._analyze_element(condition, scope, line, context)
        self._check_condition("while", condition, scope, line)

        body_context = replace(context, in_while=True)
        for form in element.elements[2:]:
            self._analyze_element(form, scope, line, body_context)

    def _analyze_return(
        self,
        element: FLangASTList,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate (return [value])."""
        if not context.in_prog and not context.in_func:
            self._record("return used outside of prog or function", line)
            return

        if len(element.elements) > 2:
            self._record(f"return expects 0 or 1 arguments, got {len(element.elements) - 1}", line)

        for arg in element.args():
            self._analyze_element(arg, scope, line, context)

    def _analyze_break(self, element: FLangASTList, line: int, context: FLangAnalysisContext) -> None:
        """Validate (break)."""
        if not context.in_while:
            self._record("break used outside of while", line)
            return

        if len(element.elements) > 1:
            self._record(f"break expects no arguments, got {len(element.elements) - 1}", line)

    def _analyze_call(
        self,
        element: FLangASTList,
        name: str,
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Validate a call to a builtin or named user function."""
        user_function = scope.lookup_function(name)
        is_builtin = FLangBuiltinRegistry.is_builtin(name)

        if not is_builtin and user_function is None and not scope.is_variable_defined(name):
            self._record(f"Call to undefined function '{name}'", line)

        args = element.args()
        for arg in args:
            self._analyze_element(arg, scope, line, context)

        # A user function bound under a builtin's name takes precedence
        if user_function is not None:
            params, _ = user_function
            if len(params) != len(args):
                self._record(f"{name} expects {len(params)} argument(s), got {len(args)}", line)

            return

        if is_builtin:
            self._check_builtin_call(name, args, scope, line, context)

    def _check_builtin_call(
        self,
        name: str,
        args: Sequence[FLangASTNode],
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Check a builtin call's arity and argument types."""
        spec = FLangBuiltinRegistry.get_spec(name)
        assert spec is not None

        if len(args) != spec.arity:
            self._record(f"{name} expects {spec.arity} argument(s), got {len(args)}", line)

        if name in FLangBuiltinRegistry.ORDERING:
            for idx, arg in enumerate(args):
                arg_type = self.infer_type(arg, scope)
                if arg_type not in self.COMPARISON_TYPES:
                    self._record(f"{name} expects number or bool for argument {idx + 1}, got {arg_type}", line)

            return

        if name in FLangBuiltinRegistry.EQUALITY:
            if any(self.infer_type(arg, scope) not in self.COMPARISON_TYPES for arg in args):
                self._record(f"{name} expects integer, real, or bool arguments", line)

            return

        if name == 'eval':
            self._analyze_eval_argument(args, scope, line, context)
            return

        if spec.arg_types is None:
            return

        for idx, (expected, arg) in enumerate(zip(spec.arg_types, args)):
            actual = self.infer_type(arg, scope)
            if expected != FLangType.ANY and actual not in (expected, FLangType.ANY):
                self._record(f"{name} expects {expected} for argument {idx + 1}, got {actual}", line)

    def _analyze_eval_argument(
        self,
        args: Sequence[FLangASTNode],
        scope: FLangSymbolTable,
        line: int,
        context: FLangAnalysisContext
    ) -> None:
        """Analyze the code inside (eval '(...)), since it will run in this scope."""
        if len(args) != 1:
            return

        arg = args[0]
        if not isinstance(arg, FLangASTList) or arg.head_name() != 'quote' or len(arg.elements) != 2:
            return

        quoted = arg.elements[1]
        if isinstance(quoted, FLangASTList):
            self._analyze_element(quoted, scope, line, context)
