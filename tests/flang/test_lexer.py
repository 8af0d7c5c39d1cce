"""Tests for the FLang lexer."""

import pytest

from flang import FLangLexer, FLangToken, FLangTokenType


def token_types(source):
    return [token.type for token in FLangLexer().tokenize(source)]


class TestLexerLiterals:
    """Test literal classification."""

    def test_integer(self):
        """Test plain and signed integers."""
        assert FLangLexer().tokenize("42") == [FLangToken(FLangTokenType.INTEGER, 42)]
        assert FLangLexer().tokenize("-7") == [FLangToken(FLangTokenType.INTEGER, -7)]
        assert FLangLexer().tokenize("+3") == [FLangToken(FLangTokenType.INTEGER, 3)]

    def test_real(self):
        """Test reals with fractions and exponents."""
        assert FLangLexer().tokenize("3.14") == [FLangToken(FLangTokenType.REAL, 3.14)]
        assert FLangLexer().tokenize("-0.5") == [FLangToken(FLangTokenType.REAL, -0.5)]
        assert FLangLexer().tokenize("1e3") == [FLangToken(FLangTokenType.REAL, 1000.0)]
        assert FLangLexer().tokenize(".5") == [FLangToken(FLangTokenType.REAL, 0.5)]

    def test_integer_preferred_over_real(self):
        """A literal with no fraction and no exponent is always an integer."""
        tokens = FLangLexer().tokenize("10")
        assert tokens[0].type == FLangTokenType.INTEGER
        assert isinstance(tokens[0].value, int)

    def test_booleans_and_null(self):
        """Test true, false and null."""
        assert FLangLexer().tokenize("true false null") == [
            FLangToken(FLangTokenType.BOOLEAN, True),
            FLangToken(FLangTokenType.BOOLEAN, False),
            FLangToken(FLangTokenType.NULL),
        ]

    @pytest.mark.parametrize("text", ["inf", "nan", "1_000", "0x10"])
    def test_python_number_spellings_are_not_numbers(self, text):
        """Python-only numeric spellings are not FLang numbers."""
        token = FLangLexer().tokenize(text)[0]
        assert token.type not in (FLangTokenType.INTEGER, FLangTokenType.REAL)


class TestLexerAtoms:
    """Test identifiers, keywords and unknown lexemes."""

    def test_keyword(self):
        """Test that keywords are recognized."""
        assert FLangLexer().tokenize("setq") == [FLangToken(FLangTokenType.KEYWORD, "setq")]
        assert FLangLexer().tokenize("greatereq") == [FLangToken(FLangTokenType.KEYWORD, "greatereq")]

    def test_identifier(self):
        """Test that all-letter atoms are identifiers."""
        assert FLangLexer().tokenize("counter") == [FLangToken(FLangTokenType.IDENTIFIER, "counter")]

    def test_keywords_are_case_sensitive(self):
        """Test that SETQ is an identifier, not a keyword."""
        assert FLangLexer().tokenize("SETQ")[0].type == FLangTokenType.IDENTIFIER

    def test_unknown(self):
        """Test that anything else is an unknown token carrying its text."""
        assert FLangLexer().tokenize("x1") == [FLangToken(FLangTokenType.UNKNOWN, "x1")]
        assert FLangLexer().tokenize("+") == [FLangToken(FLangTokenType.UNKNOWN, "+")]
        assert FLangLexer().tokenize("foo-bar") == [FLangToken(FLangTokenType.UNKNOWN, "foo-bar")]


class TestLexerStructure:
    """Test punctuation, whitespace and line breaks."""

    def test_parens_and_quote(self):
        """Test single-character tokens."""
        assert token_types("'(a)") == [
            FLangTokenType.QUOTE, FLangTokenType.LPAREN, FLangTokenType.IDENTIFIER, FLangTokenType.RPAREN
        ]

    def test_atoms_end_at_parens_and_quotes(self):
        """Test that parens and quotes split atoms."""
        tokens = FLangLexer().tokenize("(plus x'y)")
        assert [t.value for t in tokens] == ["(", "plus", "x", "'", "y", ")"]

    def test_newlines_are_tokens(self):
        """Test that line breaks survive as NEWLINE tokens."""
        assert token_types("a\n\nb") == [
            FLangTokenType.IDENTIFIER, FLangTokenType.NEWLINE, FLangTokenType.NEWLINE, FLangTokenType.IDENTIFIER
        ]

    def test_other_whitespace_is_skipped(self):
        """Test that spaces, tabs and carriage returns produce nothing."""
        assert token_types(" \t\r a \t ") == [FLangTokenType.IDENTIFIER]

    def test_empty_source(self):
        """Test that empty input gives no tokens."""
        assert FLangLexer().tokenize("") == []

    def test_never_raises(self):
        """Test that garbage input still tokenizes."""
        tokens = FLangLexer().tokenize("@#$ %^& ))((")
        assert tokens[0] == FLangToken(FLangTokenType.UNKNOWN, "@#$")
        assert len(tokens) == 6
