"""Main FLang class: the whole pipeline from source text to values."""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from flang.flang_ast import FLangASTList, FLangNode
from flang.flang_error import FLangDiagnostic, FLangParseError, FLangAnalysisError
from flang.flang_interpreter import FLangInterpreter
from flang.flang_lexer import FLangLexer
from flang.flang_optimizer import FLangOptimizer
from flang.flang_parser import FLangParser
from flang.flang_semantic_analyzer import FLangSemanticAnalyzer
from flang.flang_value import FLangValue, FLANG_NULL


@dataclass
class FLangRunResult:
    """Everything one run of a program produced."""
    values: List[FLangValue] = field(default_factory=list)
    parse_diagnostics: List[FLangDiagnostic] = field(default_factory=list)
    semantic_diagnostics: List[FLangDiagnostic] = field(default_factory=list)
    display_values: List[FLangValue] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[FLangDiagnostic]:
        """Parser diagnostics followed by semantic diagnostics."""
        return self.parse_diagnostics + self.semantic_diagnostics

    def format_display(self) -> List[str]:
        """Render the displayable values as FLang source text."""
        return [value.describe() for value in self.display_values]


class FLang:
    """
    FLang front end and evaluator.

    Strings the stages together: tokenize, parse, optionally optimize, analyze
    and interpret.  Every run gets a fresh interpreter, so programs never see
    each other's bindings.
    """

    # Top-level forms whose results are not shown
    SILENT_FORMS = frozenset({'setq', 'func', 'while'})

    def __init__(self, lenient: bool = False, optimize: bool = False, strict: bool = False, max_depth: int = 20000):
        """
        Initialize FLang.

        Args:
            lenient: Accept unknown tokens as atoms instead of reporting them
            optimize: Run the AST optimizer before interpretation
            strict: Refuse to run programs that have any diagnostics
            max_depth: Maximum evaluation depth for the interpreter
        """
        self.lenient = lenient
        self.optimize = optimize
        self.strict = strict
        self.max_depth = max_depth
        self._logger = logging.getLogger("FLang")

    def parse(self, source: str) -> Tuple[List[FLangNode], List[FLangDiagnostic]]:
        """
        Tokenize and parse a program.

        Args:
            source: Program text

        Returns:
            Tuple of (nodes that parsed, parser diagnostics)
        """
        tokens = FLangLexer().tokenize(source)
        parser = FLangParser(tokens, lenient=self.lenient)
        nodes = parser.parse_program()
        return nodes, parser.diagnostics

    def check(self, source: str) -> List[FLangDiagnostic]:
        """
        Report every parser and semantic diagnostic without running the program.

        Args:
            source: Program text

        Returns:
            Parser diagnostics followed by semantic diagnostics
        """
        nodes, parse_diagnostics = self.parse(source)
        return parse_diagnostics + FLangSemanticAnalyzer().analyze(nodes)

    def run(self, source: str) -> FLangRunResult:
        """
        Run a program through the whole pipeline.

        Args:
            source: Program text

        Returns:
            Values of every top-level form plus the diagnostics found

        Raises:
            FLangAnalysisError: In strict mode, if any diagnostic was found
            FLangEvalError: If evaluation fails
        """
        nodes, parse_diagnostics = self.parse(source)
        semantic_diagnostics = FLangSemanticAnalyzer().analyze(nodes)

        if self.strict and (parse_diagnostics or semantic_diagnostics):
            raise FLangAnalysisError(parse_diagnostics + semantic_diagnostics)

        values = FLangInterpreter(max_depth=self.max_depth).interpret(self._prepare(nodes))

        # Optimization is one node in, one node out, so the original nodes still line up
        display_values = [value for node, value in zip(nodes, values) if not self._is_silent(node)]

        return FLangRunResult(
            values=values,
            parse_diagnostics=parse_diagnostics,
            semantic_diagnostics=semantic_diagnostics,
            display_values=display_values
        )

    def evaluate(self, source: str) -> FLangValue:
        """
        Evaluate a program and return the value of its last top-level form.

        Args:
            source: Program text

        Returns:
            The last value, or null for an empty program

        Raises:
            FLangParseError: If the program does not parse cleanly
            FLangAnalysisError: In strict mode, if the analyzer reports anything
            FLangEvalError: If evaluation fails
        """
        nodes, parse_diagnostics = self.parse(source)
        if parse_diagnostics:
            first = parse_diagnostics[0]
            raise FLangParseError(
                message=first.message,
                context=f"{len(parse_diagnostics)} syntax error(s) in program" if len(parse_diagnostics) > 1 else None,
                line=first.line
            )

        if self.strict:
            semantic_diagnostics = FLangSemanticAnalyzer().analyze(nodes)
            if semantic_diagnostics:
                raise FLangAnalysisError(semantic_diagnostics)

        values = FLangInterpreter(max_depth=self.max_depth).interpret(self._prepare(nodes))
        return values[-1] if values else FLANG_NULL

    def evaluate_and_format(self, source: str) -> str:
        """
        Evaluate a program and return its last value as FLang source text.

        Args:
            source: Program text

        Returns:
            String representation of the result
        """
        return self.evaluate(source).describe()

    def _prepare(self, nodes: List[FLangNode]) -> List[FLangNode]:
        if not self.optimize:
            return nodes

        optimized = FLangOptimizer().optimize(nodes)
        self._logger.debug("optimized %d node(s)", len(optimized))
        return optimized

    def _is_silent(self, node: FLangNode) -> bool:
        element = node.element
        return isinstance(element, FLangASTList) and element.head_name() in self.SILENT_FORMS
