"""Tests for the FLang facade: the whole pipeline from source to values."""

import pytest

from flang import (
    FLang, FLangAnalysisError, FLangEvalError, FLangParseError, FLangDiagnostic, FLANG_NULL
)


class TestRun:
    """Test FLang.run."""

    def test_values_for_every_form(self, flang):
        """Test that run returns one value per top-level form."""
        result = flang.run("(setq x 5)\n(plus x 1)\n'(a b)")
        assert [value.describe() for value in result.values] == ["5", "6", "(a b)"]

    def test_silent_forms_not_displayed(self, flang, helpers):
        """Test that setq, func and while results are not shown."""
        helpers.assert_displays(
            flang,
            "(setq x 5)\n(plus x 1)\n(func f () 1)\n(while false 1)\n(f)\n'(a b)",
            ["6", "1", "(a b)"]
        )

    def test_silent_forms_with_optimizer(self, flang_optimized, helpers):
        """Test that display follows the original forms even when a dead store is rewritten."""
        helpers.assert_displays(flang_optimized, "(setq unused (plus 1 2))\n42", ["42"])

    def test_semantic_diagnostics_do_not_stop_run(self, flang):
        """Test that analysis findings are reported alongside the values."""
        result = flang.run("(cond (less 1 2) 1 missing)")
        assert [d.message for d in result.semantic_diagnostics] == ["Undeclared identifier 'missing'"]
        assert result.format_display() == ["1"]

    def test_parse_diagnostics_reported(self, flang):
        """Test that forms that parsed still run when others did not."""
        result = flang.run("(plus 1 2)\n(plus 1 @)")
        assert result.format_display() == ["3"]
        assert [(d.line, d.stage) for d in result.parse_diagnostics] == [(2, "syntax")]

    def test_diagnostics_property(self, flang):
        """Test that diagnostics lists parser findings before analyzer findings."""
        result = flang.run("(cond true 1 missing)\n(plus 1 @)")
        assert [d.stage for d in result.diagnostics] == ["syntax", "semantic"]

    def test_runtime_error_raised(self, flang):
        """Test that evaluation errors propagate with the failing line."""
        with pytest.raises(FLangEvalError) as exc_info:
            flang.run("1\n(divide 1 0)")

        assert exc_info.value.message == "Division by zero"
        assert exc_info.value.line == 2

    def test_strict_mode_refuses_to_run(self):
        """Test that strict mode raises before interpreting anything."""
        with pytest.raises(FLangAnalysisError) as exc_info:
            FLang(strict=True).run("(divide 1 0)\ny")

        diagnostics = exc_info.value.diagnostics
        assert [(d.line, d.message) for d in diagnostics] == [(2, "Undeclared identifier 'y'")]
        assert "Line 2: Semantic error: Undeclared identifier 'y'" in str(exc_info.value)

    def test_strict_mode_clean_program(self):
        """Test that strict mode runs programs without diagnostics."""
        assert FLang(strict=True).run("(plus 1 2)").format_display() == ["3"]


class TestEvaluate:
    """Test FLang.evaluate and evaluate_and_format."""

    def test_last_value(self, flang, helpers):
        """Test that evaluate returns the last form's value."""
        helpers.assert_evaluates_to(flang, "(setq x 2) (times x 3)", "6")

    def test_empty_program(self, flang):
        """Test that an empty program evaluates to null."""
        assert flang.evaluate("") == FLANG_NULL
        assert flang.evaluate_and_format("  \n ") == "null"

    def test_parse_error_raised(self, flang):
        """Test that evaluate refuses programs that do not parse."""
        with pytest.raises(FLangParseError) as exc_info:
            flang.evaluate("(plus 1 2)\n(plus 1 @)")

        assert exc_info.value.line == 2
        assert "Unexpected token '@'" in exc_info.value.message

    def test_analysis_ignored_unless_strict(self, flang):
        """Test that non-strict evaluate runs despite analyzer findings."""
        assert flang.evaluate_and_format("(cond true 1 missing)") == "1"

    def test_strict_evaluate(self):
        """Test that strict evaluate raises on analyzer findings."""
        with pytest.raises(FLangAnalysisError):
            FLang(strict=True).evaluate("(cond true 1 missing)")

    def test_lenient_atoms(self, flang_lenient):
        """Test that lenient mode accepts unknown tokens as atoms."""
        assert flang_lenient.evaluate_and_format("'(a-b c@d)") == "(a-b c@d)"

    def test_runs_are_independent(self, flang):
        """Test that bindings never leak from one run to the next."""
        flang.evaluate("(setq x 1)")
        with pytest.raises(FLangEvalError) as exc_info:
            flang.evaluate("x")

        assert exc_info.value.message == "Undefined atom: 'x'"


class TestCheckAndParse:
    """Test the non-executing entry points."""

    def test_check_does_not_run(self, flang):
        """Test that check only reports, so runtime errors are not seen."""
        assert flang.check("(divide 1 0)") == []

    def test_check_reports_both_stages(self, flang):
        """Test that check returns parser then analyzer diagnostics."""
        diagnostics = flang.check("(plus true 1)\n(plus 1 @)")
        assert diagnostics == [
            FLangDiagnostic(2, "Unexpected token '@'", stage="syntax"),
            FLangDiagnostic(1, "plus expects number for argument 1, got bool"),
        ]

    def test_parse(self, flang):
        """Test that parse returns nodes and diagnostics."""
        nodes, diagnostics = flang.parse("1\n(plus 2 3)")
        assert [node.line for node in nodes] == [1, 2]
        assert diagnostics == []
