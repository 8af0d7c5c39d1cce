"""Lexer for FLang programs."""

import re
from typing import FrozenSet, List

from flang.flang_token import FLangToken, FLangTokenType


KEYWORDS: FrozenSet[str] = frozenset({
    "quote", "setq", "func", "lambda", "prog", "cond",
    "while", "return", "break",
    "plus", "minus", "times", "divide",
    "head", "tail", "cons",
    "equal", "nonequal", "less", "lesseq", "greater", "greatereq",
    "isint", "isreal", "isbool", "isnull", "isatom", "islist",
    "and", "or", "xor", "not", "eval",
})

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_REAL_PATTERN = re.compile(r"[+-]?([0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)([eE][+-]?[0-9]+)?")


class FLangLexer:
    """
    Turns FLang source text into tokens.

    The lexer never raises.  Anything it cannot classify becomes an UNKNOWN
    token carrying the raw text, and the parser decides what to do with it.
    """

    def tokenize(self, source: str) -> List[FLangToken]:
        """
        Tokenize an FLang program in a single left-to-right scan.

        Args:
            source: The program text

        Returns:
            List of tokens, including NEWLINE tokens for every line break
        """
        tokens: List[FLangToken] = []
        i = 0

        while i < len(source):
            char = source[i]

            # Line breaks are kept so the parser can count lines
            if char == '\n':
                tokens.append(FLangToken(FLangTokenType.NEWLINE))
                i += 1
                continue

            if char.isspace():
                i += 1
                continue

            if char == '(':
                tokens.append(FLangToken(FLangTokenType.LPAREN, '('))
                i += 1
                continue

            if char == ')':
                tokens.append(FLangToken(FLangTokenType.RPAREN, ')'))
                i += 1
                continue

            if char == "'":
                tokens.append(FLangToken(FLangTokenType.QUOTE, "'"))
                i += 1
                continue

            atom, length = self._read_atom(source, i)
            tokens.append(self._classify_atom(atom))
            i += length

        return tokens

    def _read_atom(self, source: str, start: int) -> tuple[str, int]:
        """
        Read a maximal run of characters that are not whitespace, parens or quotes.

        Returns:
            Tuple of (atom_text, length_consumed)
        """
        i = start
        while i < len(source):
            char = source[i]
            if char.isspace() or char in "()'":
                break

            i += 1

        return source[start:i], i - start

    def _classify_atom(self, atom: str) -> FLangToken:
        """Classify a raw atom: literals, keywords, integers, reals, identifiers, then unknown."""
        if atom == "true":
            return FLangToken(FLangTokenType.BOOLEAN, True)

        if atom == "false":
            return FLangToken(FLangTokenType.BOOLEAN, False)

        if atom == "null":
            return FLangToken(FLangTokenType.NULL)

        if atom in KEYWORDS:
            return FLangToken(FLangTokenType.KEYWORD, atom)

        # Integers take priority so that "3" never becomes a real
        if _INTEGER_PATTERN.fullmatch(atom):
            return FLangToken(FLangTokenType.INTEGER, int(atom))

        if _REAL_PATTERN.fullmatch(atom):
            return FLangToken(FLangTokenType.REAL, float(atom))

        if atom.isalpha():
            return FLangToken(FLangTokenType.IDENTIFIER, atom)

        return FLangToken(FLangTokenType.UNKNOWN, atom)
