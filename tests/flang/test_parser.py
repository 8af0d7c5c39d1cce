"""Tests for the FLang parser, including error recovery."""

from flang import (
    FLangLexer, FLangParser, FLangParseError, FLangASTAtom, FLangASTInteger, FLangASTReal,
    FLangASTBoolean, FLangASTNull, FLangASTList
)

import pytest


def parse(source, lenient=False):
    parser = FLangParser(FLangLexer().tokenize(source), lenient=lenient)
    nodes = parser.parse_program()
    return nodes, parser.diagnostics


class TestParserElements:
    """Test parsing of individual elements."""

    def test_literals(self):
        """Test every literal kind."""
        nodes, diagnostics = parse("42 3.5 true null x")
        assert diagnostics == []
        assert [node.element for node in nodes] == [
            FLangASTInteger(42), FLangASTReal(3.5), FLangASTBoolean(True), FLangASTNull(), FLangASTAtom("x")
        ]

    def test_nested_list(self):
        """Test nested lists."""
        nodes, _ = parse("(plus 1 (times 2 3))")
        assert nodes[0].element == FLangASTList((
            FLangASTAtom("plus"),
            FLangASTInteger(1),
            FLangASTList((FLangASTAtom("times"), FLangASTInteger(2), FLangASTInteger(3))),
        ))

    def test_empty_list(self):
        """Test ()."""
        nodes, _ = parse("()")
        assert nodes[0].element == FLangASTList(())

    def test_quote_desugars(self):
        """Test that 'x becomes (quote x)."""
        nodes, _ = parse("'x '(a b)")
        assert nodes[0].element == FLangASTList((FLangASTAtom("quote"), FLangASTAtom("x")))
        assert nodes[1].element == FLangASTList((
            FLangASTAtom("quote"), FLangASTList((FLangASTAtom("a"), FLangASTAtom("b")))
        ))

    def test_keywords_become_atoms(self):
        """Test that keywords outside head position are plain atoms."""
        nodes, _ = parse("'(setq plus while)")
        quoted = nodes[0].element.elements[1]
        assert quoted.elements == (FLangASTAtom("setq"), FLangASTAtom("plus"), FLangASTAtom("while"))

    def test_line_not_part_of_equality(self):
        """Test that the same element on different lines compares equal."""
        first, _ = parse("(plus 1 2)")
        second, _ = parse("\n\n(plus 1 2)")
        assert first[0].element == second[0].element
        assert first[0].line == 1
        assert second[0].line == 3


class TestParserLines:
    """Test source line tracking."""

    def test_top_level_lines(self):
        """Test that each node records the line it starts on."""
        nodes, _ = parse("1\n\n(plus 1\n 2)\nx")
        assert [node.line for node in nodes] == [1, 3, 5]

    def test_nested_element_lines(self):
        """Test that nested elements record their own lines."""
        nodes, _ = parse("(prog ()\n  (setq a 1)\n  a)")
        prog = nodes[0].element
        assert prog.line == 1
        assert prog.elements[2].line == 2
        assert prog.elements[3].line == 3


class TestParserRecovery:
    """Test that malformed input is reported and skipped."""

    def test_unknown_token_in_strict_mode(self):
        """Test that a bad form is reported with its line and siblings survive."""
        nodes, diagnostics = parse("(plus 1 2)\n(plus 1 @)\n(times 2 3)")
        assert [node.describe() for node in nodes] == ["(plus 1 2)", "(times 2 3)"]
        assert [node.line for node in nodes] == [1, 3]
        assert len(diagnostics) == 1
        assert diagnostics[0].line == 2
        assert "Unexpected token '@'" in diagnostics[0].message
        assert str(diagnostics[0]) == "Line 2: Syntax error: Unexpected token '@'"

    def test_unknown_token_in_lenient_mode(self):
        """Test that lenient mode turns unknown tokens into atoms."""
        nodes, diagnostics = parse("(plus 1 @)", lenient=True)
        assert diagnostics == []
        assert nodes[0].element.elements[2] == FLangASTAtom("@")

    def test_stray_closing_paren(self):
        """Test that an extra ')' is reported and parsing continues."""
        nodes, diagnostics = parse("(plus 1 2))\n5")
        assert [node.describe() for node in nodes] == ["(plus 1 2)", "5"]
        assert len(diagnostics) == 1
        assert diagnostics[0].line == 1
        assert "')'" in diagnostics[0].message

    def test_recovery_keeps_next_open_paren(self):
        """Test that synchronization stops before '(' on the same line."""
        nodes, diagnostics = parse("@ (plus 1 2)")
        assert len(diagnostics) == 1
        assert [node.describe() for node in nodes] == ["(plus 1 2)"]

    def test_several_errors_all_reported(self):
        """Test that every malformed line gets its own diagnostic."""
        nodes, diagnostics = parse("(a $)\n1\n(b %)\n2")
        assert [d.line for d in diagnostics] == [1, 3]
        assert [node.describe() for node in nodes] == ["1", "2"]

    def test_missing_closing_paren(self):
        """Test that a missing ')' is reported once and ends the parse."""
        nodes, diagnostics = parse("1\n(plus 1\n(times 2 3)")
        assert [node.describe() for node in nodes] == ["1"]
        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Missing closing parenthesis"
        assert diagnostics[0].line == 3

    def test_trailing_quote(self):
        """Test that a quote with nothing after it is reported."""
        nodes, diagnostics = parse("1 '")
        assert [node.describe() for node in nodes] == ["1"]
        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Unexpected end of input"

    def test_parse_element_raises(self):
        """Test that the recursive unit raises instead of recording."""
        parser = FLangParser(FLangLexer().tokenize(")"))
        with pytest.raises(FLangParseError):
            parser.parse_element()
