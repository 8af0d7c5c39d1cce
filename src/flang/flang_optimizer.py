"""
FLang AST Optimizer - rewrites parsed programs before interpretation.

This module runs a sequence of optimization passes over the top-level nodes.
Every pass is pure and preserves runtime semantics: interpreting the optimized
program gives the same values, the same errors and the same side effects in the
same order as interpreting the original.
"""

from typing import List

from flang.flang_ast import FLangNode
from flang.flang_constant_folder import FLangConstantFolder
from flang.flang_dead_store_eliminator import FLangDeadStoreEliminator


class FLangOptimizer:
    """
    Orchestrates AST optimization passes.

    This class manages multiple optimization passes and applies them in sequence.
    """

    PASS_NAMES = ('constant_folding', 'dead_store_elimination')

    def __init__(self, enable_passes: List[str] | None = None):
        """
        Initialize with optional pass selection.

        Args:
            enable_passes: List of pass names to enable, or None for all passes
        """
        all_passes = {
            'constant_folding': FLangConstantFolder(),
            'dead_store_elimination': FLangDeadStoreEliminator(),
        }

        if enable_passes is None:
            # Enable all passes by default
            self.passes = list(all_passes.values())

        else:
            # Enable only specified passes, always in the standard order
            self.passes = [all_passes[name] for name in self.PASS_NAMES if name in enable_passes]

    def optimize(self, nodes: List[FLangNode]) -> List[FLangNode]:
        """
        Run all enabled optimization passes in sequence.

        Args:
            nodes: Input top-level nodes

        Returns:
            Optimized top-level nodes, one per input node
        """
        optimized = list(nodes)
        for pass_instance in self.passes:
            optimized = pass_instance.optimize(optimized)

        return optimized
