"""Shared fixtures and utilities for FLang tests."""

from typing import List

import pytest

from flang import FLang, FLangLexer, FLangParser, FLangInterpreter, FLangNode, FLangValue


@pytest.fixture
def flang():
    """Create a fresh FLang instance for each test."""
    return FLang()


@pytest.fixture
def flang_lenient():
    """FLang instance that accepts unknown tokens as atoms."""
    return FLang(lenient=True)


@pytest.fixture
def flang_optimized():
    """FLang instance that runs the optimizer before interpreting."""
    return FLang(optimize=True)


class FLangTestHelpers:
    """Helper utilities for FLang testing."""

    @staticmethod
    def parse(source: str, lenient: bool = False) -> List[FLangNode]:
        """Parse source, asserting that it parses cleanly."""
        parser = FLangParser(FLangLexer().tokenize(source), lenient=lenient)
        nodes = parser.parse_program()
        assert parser.diagnostics == [], f"Unexpected diagnostics: {[str(d) for d in parser.diagnostics]}"
        return nodes

    @staticmethod
    def interpret(source: str) -> List[FLangValue]:
        """Parse and interpret source on a fresh interpreter."""
        return FLangInterpreter().interpret(FLangTestHelpers.parse(source))

    @staticmethod
    def assert_evaluates_to(flang: FLang, source: str, expected: str) -> None:
        """Assert that a program's last value formats as expected."""
        result = flang.evaluate_and_format(source)
        assert result == expected, f"Expected '{expected}', got '{result}'"

    @staticmethod
    def assert_displays(flang: FLang, source: str, expected: List[str]) -> None:
        """Assert the values a program would display, in order."""
        result = flang.run(source).format_display()
        assert result == expected, f"Expected {expected}, got {result}"


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return FLangTestHelpers
