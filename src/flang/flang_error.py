"""Exception classes and diagnostics for FLang with detailed context."""

from dataclasses import dataclass
from typing import List, Optional
import difflib


class FLangError(Exception):
    """Base exception for FLang errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        line: Optional[int] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            line: Source line (1-indexed) where the error occurred
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.line = line

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.line is not None:
            parts.append(f"Line: {self.line}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)


class FLangParseError(FLangError):
    """Parsing errors with detailed context."""


class FLangEvalError(FLangError):
    """Evaluation errors with detailed context."""


@dataclass(frozen=True)
class FLangDiagnostic:
    """A non-fatal problem found while parsing or analyzing a program."""
    line: int
    message: str
    stage: str = "semantic"

    def __str__(self) -> str:
        return f"Line {self.line}: {self.stage.capitalize()} error: {self.message}"


class FLangAnalysisError(FLangError):
    """Raised when a caller asks for a clean analysis and diagnostics were found."""

    def __init__(self, diagnostics: List[FLangDiagnostic]):
        """
        Initialize with the diagnostics that blocked evaluation.

        Args:
            diagnostics: Parser and semantic diagnostics, in source order
        """
        self.diagnostics = list(diagnostics)
        first_line = self.diagnostics[0].line if self.diagnostics else None
        super().__init__(
            message=f"Program has {len(self.diagnostics)} diagnostic(s)",
            context="\n".join(str(d) for d in self.diagnostics),
            suggestion="Fix the reported problems or disable strict mode",
            line=first_line
        )


class ErrorMessageBuilder:
    """Helper class for building detailed error messages."""

    @staticmethod
    def suggest_similar_names(target: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
        """Suggest similar names using fuzzy matching."""
        if not target or not available_names:
            return []

        return difflib.get_close_matches(target, available_names, n=max_suggestions, cutoff=0.6)

    @staticmethod
    def create_function_example(func_name: str) -> str:
        """Create usage example for builtins and special forms."""
        examples = {
            # Arithmetic
            'plus': "(plus 1 2) → 3",
            'minus': "(minus 5 2) → 3",
            'times': "(times 3 4) → 12",
            'divide': "(divide 3 2) → 1.5",

            # Comparison
            'equal': "(equal 1 1) → true",
            'nonequal': "(nonequal 1 2) → true",
            'less': "(less 1 2) → true",
            'lesseq': "(lesseq 2 2) → true",
            'greater': "(greater 3 2) → true",
            'greatereq': "(greatereq 3 3) → true",

            # Logic
            'and': "(and true false) → false",
            'or': "(or true false) → true",
            'xor': "(xor true false) → true",
            'not': "(not true) → false",

            # Lists
            'head': "(head '(a b c)) → a",
            'tail': "(tail '(a b c)) → (b c)",
            'cons': "(cons 1 '(2 3)) → (1 2 3)",

            # Predicates
            'isint': "(isint 3) → true",
            'isreal': "(isreal 3.0) → true",
            'isbool': "(isbool false) → true",
            'isnull': "(isnull null) → true",
            'isatom': "(isatom 'x) → true",
            'islist': "(islist '(1 2)) → true",

            # Special forms
            'eval': "(eval '(plus 1 2)) → 3",
            'quote': "(quote (a b)) → (a b)",
            'setq': "(setq x 5) → 5",
            'func': "(func inc (x) (plus x 1))",
            'lambda': "((lambda (x) (times x x)) 4) → 16",
            'prog': "(prog (a) (setq a 1) (plus a 2)) → 3",
            'cond': "(cond (less 1 2) 100 200) → 100",
            'while': "(while (less i 3) (setq i (plus i 1)))",
            'return': "(prog () (return 99) 5) → 99",
            'break': "(while true (break)) → null",
        }

        return examples.get(func_name, f"({func_name} ...)")
