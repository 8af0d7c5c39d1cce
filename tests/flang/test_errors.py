"""Tests for FLang error formatting and diagnostics."""

from flang import (
    FLangError, FLangEvalError, FLangAnalysisError, FLangDiagnostic, ErrorMessageBuilder
)


class TestErrorFormatting:
    """Test the detailed error message layout."""

    def test_message_only(self):
        """Test an error with nothing but a message."""
        error = FLangEvalError("Division by zero")
        assert str(error) == "Error: Division by zero"
        assert error.line is None

    def test_all_fields(self):
        """Test that every field is shown in a fixed order."""
        error = FLangEvalError(
            message="Bad call",
            context="While evaluating: (f)",
            expected="A function",
            received="5",
            suggestion="Define f first",
            example="(func f () 1)",
            line=3
        )
        assert str(error) == "\n".join([
            "Error: Bad call",
            "Line: 3",
            "Received: 5",
            "Expected: A function",
            "Context: While evaluating: (f)",
            "Suggestion: Define f first",
            "Example: (func f () 1)",
        ])

    def test_hierarchy(self):
        """Test that every FLang exception shares the base class."""
        assert isinstance(FLangEvalError("x"), FLangError)
        assert isinstance(FLangAnalysisError([]), FLangError)


class TestDiagnostics:
    """Test diagnostic rendering."""

    def test_semantic_diagnostic(self):
        """Test the default stage."""
        assert str(FLangDiagnostic(4, "Undeclared identifier 'x'")) == "Line 4: Semantic error: Undeclared identifier 'x'"

    def test_syntax_diagnostic(self):
        """Test a parser diagnostic."""
        assert str(FLangDiagnostic(1, "Missing closing parenthesis", stage="syntax")) == \
            "Line 1: Syntax error: Missing closing parenthesis"

    def test_analysis_error_carries_diagnostics(self):
        """Test that the analysis error keeps every diagnostic and points at the first."""
        diagnostics = [FLangDiagnostic(2, "a"), FLangDiagnostic(5, "b")]
        error = FLangAnalysisError(diagnostics)
        assert error.diagnostics == diagnostics
        assert error.line == 2
        assert error.message == "Program has 2 diagnostic(s)"


class TestErrorMessageBuilder:
    """Test the suggestion helpers."""

    def test_similar_names(self):
        """Test fuzzy name suggestions."""
        assert ErrorMessageBuilder.suggest_similar_names("plsu", ["plus", "minus", "times"]) == ["plus"]

    def test_no_names(self):
        """Test that nothing is suggested from an empty list."""
        assert ErrorMessageBuilder.suggest_similar_names("x", []) == []

    def test_examples(self):
        """Test examples for known and unknown names."""
        assert ErrorMessageBuilder.create_function_example('cons') == "(cons 1 '(2 3)) → (1 2 3)"
        assert ErrorMessageBuilder.create_function_example('mystery') == "(mystery ...)"
