"""
FLang dead-store elimination pass.

A top-level `setq` whose target is never referenced anywhere in the program is
replaced by its value expression.  The assignment disappears but the value is
still computed, so side effects inside it happen exactly as before and the
node still produces the same value.
"""

import logging
from typing import List, Set

from flang.flang_ast import FLangASTNode, FLangASTAtom, FLangASTList, FLangNode
from flang.flang_optimization_pass import FLangOptimizationPass


class FLangDeadStoreEliminator(FLangOptimizationPass):
    """Remove top-level assignments to variables that are never read."""

    def __init__(self) -> None:
        self._logger = logging.getLogger("FLangDeadStoreEliminator")

    def optimize(self, nodes: List[FLangNode]) -> List[FLangNode]:
        """
        Rewrite dead top-level stores to their value expressions.

        Args:
            nodes: Input top-level nodes

        Returns:
            New nodes, one per input node, with the same source lines
        """
        declared: Set[str] = set()
        used: Set[str] = set()

        for node in nodes:
            target = self._store_target(node.element)
            if target is not None:
                declared.add(target)

            self._collect_used(node.element, used)

        dead = declared - used
        result: List[FLangNode] = []
        for node in nodes:
            element = node.element
            target = self._store_target(element)
            if target is not None and target in dead:
                assert isinstance(element, FLangASTList)
                self._logger.debug("line %d: removing dead store to '%s'", node.line, target)
                element = element.elements[2]

            result.append(FLangNode(element, node.line))

        return result

    def _store_target(self, element: FLangASTNode) -> str | None:
        """Return the target name if the element is a well-formed (setq name value)."""
        if not isinstance(element, FLangASTList) or element.head_name() != 'setq':
            return None

        if len(element.elements) != 3 or not isinstance(element.elements[1], FLangASTAtom):
            return None

        return element.elements[1].name

    def _collect_used(self, element: FLangASTNode, used: Set[str]) -> None:
        """Record every atom that appears anywhere other than as a setq target."""
        if isinstance(element, FLangASTAtom):
            used.add(element.name)
            return

        if not isinstance(element, FLangASTList):
            return

        elements = element.elements
        if element.head_name() == 'setq' and len(elements) > 1 and isinstance(elements[1], FLangASTAtom):
            # Skip the head and the target, keep everything after
            elements = elements[2:]

        for elem in elements:
            self._collect_used(elem, used)
