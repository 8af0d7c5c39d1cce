"""
FLang constant folding pass.

Evaluates builtin calls whose operands are all literals and replaces them with
the literal result.  The arithmetic is done by the same helpers the
interpreter's builtins use, so a folded call always yields exactly the value
the interpreter would have produced.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Set

from flang.flang_ast import (
    FLangASTNode, FLangASTAtom, FLangASTInteger, FLangASTReal, FLangASTBoolean, FLangASTList, FLangNode
)
from flang.flang_math import (
    ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, LOGICAL_OPERATORS,
    compute_arithmetic, compute_comparison, compute_logical
)
from flang.flang_optimization_pass import FLangOptimizationPass


class FLangConstantFolder(FLangOptimizationPass):
    """
    Fold constant builtin calls, bottom-up.

    Examples:
        (plus 1 2) → 3
        (divide 3 2) → 1.5
        (times (plus 1 1) 3) → 6
        (less true 2) → true
        (and true false) → false

    Calls are left alone when folding could change behaviour: division by a
    literal zero, operands the builtin would reject at run time, a wrong
    number of operands, anything inside quoted data, and any builtin name the
    program may rebind.
    """

    FOLDABLE_BUILTINS = frozenset(ARITHMETIC_OPERATORS) | frozenset(COMPARISON_OPERATORS) | \
        frozenset(LOGICAL_OPERATORS) | frozenset({'not'})

    def __init__(self) -> None:
        """Initialize jump tables for builtin folding and special form traversal."""
        self._logger = logging.getLogger("FLangConstantFolder")

        self._builtin_jump_table: Dict[str, Callable[[str, List[FLangASTNode]], FLangASTNode | None]] = {}
        for name in ARITHMETIC_OPERATORS:
            self._builtin_jump_table[name] = self._fold_arithmetic

        for name in COMPARISON_OPERATORS:
            self._builtin_jump_table[name] = self._fold_comparison

        for name in LOGICAL_OPERATORS:
            self._builtin_jump_table[name] = self._fold_logical

        self._builtin_jump_table['not'] = self._fold_not

        # Special forms only have some of their arguments evaluated, so each
        # one decides which positions are safe to fold.
        self._special_form_jump_table: Dict[str, Callable[[FLangASTList], FLangASTNode]] = {
            'quote': self._optimize_quote,
            'setq': self._optimize_setq,
            'func': self._optimize_func,
            'lambda': self._optimize_lambda,
            'prog': self._optimize_prog,
            'cond': self._optimize_cond,
            'while': self._optimize_while,
            'return': self._optimize_return,
            'break': self._optimize_quote,
        }

        self._rebound_names: Set[str] = set()

    def optimize(self, nodes: List[FLangNode]) -> List[FLangNode]:
        """
        Fold constants in every top-level node.

        Args:
            nodes: Input top-level nodes

        Returns:
            New nodes, one per input node, with the same source lines
        """
        self._rebound_names = set()
        for node in nodes:
            self._collect_rebound_names(node.element, quoted=False)

        if self._rebound_names:
            self._logger.debug("not folding rebound builtins: %s", sorted(self._rebound_names))

        return [FLangNode(self.optimize_element(node.element), node.line) for node in nodes]

    def optimize_element(self, expr: FLangASTNode) -> FLangASTNode:
        """
        Recursively fold constants in an element.

        Args:
            expr: Input element

        Returns:
            Optimized element (may be the input itself if nothing could be folded)
        """
        # Only lists can fold; everything else passes through
        if not isinstance(expr, FLangASTList) or expr.is_empty():
            return expr

        name = expr.head_name()
        if name is not None:
            if name in self._special_form_jump_table:
                return self._special_form_jump_table[name](expr)

            if name in self.FOLDABLE_BUILTINS and name not in self._rebound_names:
                return self._try_fold_builtin(name, expr)

        return self._optimize_elements(expr, 0)

    def _collect_rebound_names(self, expr: FLangASTNode, quoted: bool) -> None:
        """
        Record every foldable builtin name the program might bind.

        Names in binding positions of setq, func, lambda and prog count, as
        does any foldable name inside quoted data, because eval can turn that
        data into a binding form.
        """
        if isinstance(expr, FLangASTAtom):
            if quoted and expr.name in self.FOLDABLE_BUILTINS:
                self._rebound_names.add(expr.name)

            return

        if not isinstance(expr, FLangASTList):
            return

        head = expr.head_name()
        if not quoted and head == 'quote':
            for arg in expr.args():
                self._collect_rebound_names(arg, quoted=True)

            return

        if not quoted:
            self._collect_binding_names(head, expr)

        for elem in expr.elements:
            self._collect_rebound_names(elem, quoted)

    def _collect_binding_names(self, head: str | None, expr: FLangASTList) -> None:
        """Record the names a setq, func, lambda or prog form binds."""
        bound: List[FLangASTNode] = []
        elements = expr.elements

        if head == 'setq' and len(elements) > 1:
            bound.append(elements[1])

        elif head == 'func' and len(elements) > 1:
            bound.append(elements[1])
            if len(elements) > 2 and isinstance(elements[2], FLangASTList):
                bound.extend(elements[2].elements)

        elif head in ('lambda', 'prog') and len(elements) > 1 and isinstance(elements[1], FLangASTList):
            bound.extend(elements[1].elements)

        for target in bound:
            if isinstance(target, FLangASTAtom) and target.name in self.FOLDABLE_BUILTINS:
                self._rebound_names.add(target.name)

    def _optimize_elements(self, expr: FLangASTList, start: int) -> FLangASTList:
        """Optimize every element from `start` onwards, keeping earlier ones untouched."""
        optimized = expr.elements[:start] + tuple(self.optimize_element(elem) for elem in expr.elements[start:])
        return FLangASTList(optimized, line=expr.line)

    def _optimize_quote(self, expr: FLangASTList) -> FLangASTNode:
        """Quoted data is never evaluated, so it is never folded."""
        return expr

    def _optimize_setq(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (setq name value): only the value is evaluated."""
        if len(expr.elements) != 3 or not isinstance(expr.elements[1], FLangASTAtom):
            return expr

        return self._optimize_elements(expr, 2)

    def _optimize_func(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (func name (params) body): only the body is evaluated."""
        if len(expr.elements) != 4 or not isinstance(expr.elements[1], FLangASTAtom) or \
                not self._is_atom_list(expr.elements[2]):
            return expr

        return self._optimize_elements(expr, 3)

    def _optimize_lambda(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (lambda (params) body)."""
        if len(expr.elements) != 3 or not self._is_atom_list(expr.elements[1]):
            return expr

        return self._optimize_elements(expr, 2)

    def _optimize_prog(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (prog (locals) forms...)."""
        if len(expr.elements) < 2 or not self._is_atom_list(expr.elements[1]):
            return expr

        return self._optimize_elements(expr, 2)

    def _optimize_cond(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (cond test then [else])."""
        if len(expr.elements) not in (3, 4):
            return expr

        return self._optimize_elements(expr, 1)

    def _optimize_while(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (while test forms...)."""
        if len(expr.elements) < 2:
            return expr

        return self._optimize_elements(expr, 1)

    def _optimize_return(self, expr: FLangASTList) -> FLangASTNode:
        """Optimize (return [value])."""
        if len(expr.elements) > 2:
            return expr

        return self._optimize_elements(expr, 1)

    def _is_atom_list(self, expr: FLangASTNode) -> bool:
        return isinstance(expr, FLangASTList) and all(isinstance(e, FLangASTAtom) for e in expr.elements)

    def _try_fold_builtin(self, name: str, expr: FLangASTList) -> FLangASTNode:
        """
        Try to fold a builtin call.

        Args:
            name: Name of the builtin
            expr: The whole call

        Returns:
            Folded literal, or the call with its arguments optimized
        """
        args = [self.optimize_element(arg) for arg in expr.args()]

        folded = self._builtin_jump_table[name](name, args)
        if folded is None:
            return FLangASTList((expr.elements[0],) + tuple(args), line=expr.line)

        self._logger.debug("folded %s -> %s", expr.describe(), folded.describe())
        return replace(folded, line=expr.line)

    def _number_literal(self, node: FLangASTNode) -> float | None:
        """Extract a real from an integer or real literal."""
        if isinstance(node, (FLangASTInteger, FLangASTReal)):
            return float(node.value)

        return None

    def _make_number(self, value: int | float) -> FLangASTNode:
        if isinstance(value, int):
            return FLangASTInteger(value)

        return FLangASTReal(value)

    def _fold_arithmetic(self, name: str, args: List[FLangASTNode]) -> FLangASTNode | None:
        """Fold plus, minus, times and divide over two numeric literals."""
        if len(args) != 2:
            return None

        try:
            left = self._number_literal(args[0])
            right = self._number_literal(args[1])

        except OverflowError:
            # Integer literal too large for a real; leave it to the interpreter
            return None

        if left is None or right is None:
            return None

        if name == 'divide' and right == 0:
            return None

        return self._make_number(compute_arithmetic(name, left, right))

    def _fold_comparison(self, name: str, args: List[FLangASTNode]) -> FLangASTNode | None:
        """Fold comparisons over numeric or boolean literals (booleans as 1.0/0.0)."""
        if len(args) != 2:
            return None

        operands: List[float] = []
        for arg in args:
            if isinstance(arg, FLangASTBoolean):
                operands.append(1.0 if arg.value else 0.0)
                continue

            try:
                value = self._number_literal(arg)

            except OverflowError:
                return None

            if value is None:
                return None

            operands.append(value)

        return FLangASTBoolean(compute_comparison(name, operands[0], operands[1]))

    def _fold_logical(self, name: str, args: List[FLangASTNode]) -> FLangASTNode | None:
        """Fold and, or and xor over two boolean literals."""
        if len(args) != 2 or not all(isinstance(arg, FLangASTBoolean) for arg in args):
            return None

        left, right = args
        assert isinstance(left, FLangASTBoolean) and isinstance(right, FLangASTBoolean)
        return FLangASTBoolean(compute_logical(name, left.value, right.value))

    def _fold_not(self, _name: str, args: List[FLangASTNode]) -> FLangASTNode | None:
        """Fold not over a boolean literal."""
        if len(args) != 1 or not isinstance(args[0], FLangASTBoolean):
            return None

        return FLangASTBoolean(not args[0].value)
