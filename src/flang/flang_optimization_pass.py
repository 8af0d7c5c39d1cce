"""
FLang AST optimization pass
"""

from typing import List

from flang.flang_ast import FLangNode


class FLangOptimizationPass:
    """Base class for AST optimization passes."""

    def optimize(self, nodes: List[FLangNode]) -> List[FLangNode]:
        """
        Transform a program, returning an optimized version.

        Passes never mutate their input and always return exactly one node per
        input node, keeping each node's source line.

        Args:
            nodes: Input top-level nodes

        Returns:
            Optimized top-level nodes
        """
        raise NotImplementedError
