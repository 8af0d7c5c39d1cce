"""Recovering recursive-descent parser for FLang programs."""

import logging
from typing import List

from flang.flang_ast import (
    FLangASTNode, FLangASTAtom, FLangASTInteger, FLangASTReal, FLangASTBoolean,
    FLangASTNull, FLangASTList, FLangNode
)
from flang.flang_error import FLangDiagnostic, FLangParseError
from flang.flang_token import FLangToken, FLangTokenType


class FLangParser:
    """
    Parses tokens into a list of top-level nodes.

    `parse_program` never raises.  Problems are recorded in `diagnostics` and
    the parser resynchronizes so that well-formed sibling forms still make it
    into the result.
    """

    def __init__(self, tokens: List[FLangToken], lenient: bool = False):
        """
        Initialize parser with tokens.

        Args:
            tokens: List of tokens to parse
            lenient: If True, unknown tokens become atoms instead of errors
        """
        self.tokens = tokens
        self.lenient = lenient
        self.pos = 0
        self.current_token: FLangToken | None = tokens[0] if tokens else None
        self.line = 1
        self.diagnostics: List[FLangDiagnostic] = []

        # Number of '(' consumed but not yet closed
        self._open_depth = 0
        self._logger = logging.getLogger("FLangParser")

    def parse_program(self) -> List[FLangNode]:
        """
        Parse every top-level form.

        Returns:
            The nodes that parsed successfully, in source order
        """
        nodes: List[FLangNode] = []

        while self.current_token is not None:
            if self.current_token.type == FLangTokenType.NEWLINE:
                self._advance()
                continue

            start_line = self.line
            try:
                element = self.parse_element()
                nodes.append(FLangNode(element, start_line))

            except FLangParseError as e:
                line = e.line if e.line is not None else self.line
                self.diagnostics.append(FLangDiagnostic(line, e.message, stage="syntax"))
                self._logger.debug("parse error at line %d: %s", line, e.message)

                # Running out of input is reported once and ends the parse
                if self.current_token is None:
                    break

                self._synchronize()

        return nodes

    def parse_element(self) -> FLangASTNode:
        """
        Parse a single element, recursing into lists.

        Returns:
            The parsed element

        Raises:
            FLangParseError: If the tokens do not form an element
        """
        self._skip_newlines()

        token = self.current_token
        if token is None:
            raise FLangParseError(
                message="Unexpected end of input",
                expected="An atom, literal, '(' or '",
                line=self.line
            )

        line = self.line

        if token.type == FLangTokenType.INTEGER:
            self._advance()
            return FLangASTInteger(token.value, line=line)

        if token.type == FLangTokenType.REAL:
            self._advance()
            return FLangASTReal(token.value, line=line)

        if token.type == FLangTokenType.BOOLEAN:
            self._advance()
            return FLangASTBoolean(token.value, line=line)

        if token.type == FLangTokenType.NULL:
            self._advance()
            return FLangASTNull(line=line)

        # Keywords are only special in head position, and that is decided later
        if token.type in (FLangTokenType.IDENTIFIER, FLangTokenType.KEYWORD):
            self._advance()
            return FLangASTAtom(token.value, line=line)

        if token.type == FLangTokenType.QUOTE:
            return self._parse_quoted_expression()

        if token.type == FLangTokenType.LPAREN:
            return self._parse_list()

        if token.type == FLangTokenType.UNKNOWN and self.lenient:
            self._advance()
            return FLangASTAtom(token.value, line=line)

        # Unknown token in strict mode, or a stray ')'
        self._advance()
        if token.type == FLangTokenType.RPAREN:
            self._open_depth = max(0, self._open_depth - 1)

        raise FLangParseError(
            message=f"Unexpected token '{token.describe()}'",
            received=f"Token: {token.describe()} (type: {token.type.name})",
            expected="Integer, real, boolean, null, identifier, '(' or '",
            suggestion="Identifiers may only contain letters" if token.type == FLangTokenType.UNKNOWN
                else "Remove the extra closing parenthesis",
            line=line
        )

    def _parse_list(self) -> FLangASTList:
        """Parse (element1 element2 ...)."""
        start_line = self.line
        self._advance()  # consume '('
        self._open_depth += 1

        elements: List[FLangASTNode] = []
        while True:
            self._skip_newlines()

            if self.current_token is None:
                raise FLangParseError(
                    message="Missing closing parenthesis",
                    context=f"List opened on line {start_line} is never closed",
                    suggestion="Add ')' to close the list",
                    example="Correct: (plus 1 2)\nIncorrect: (plus 1 2",
                    line=self.line
                )

            if self.current_token.type == FLangTokenType.RPAREN:
                self._advance()
                self._open_depth -= 1
                return FLangASTList(tuple(elements), line=start_line)

            elements.append(self.parse_element())

    def _parse_quoted_expression(self) -> FLangASTList:
        """Parse 'expr and convert to (quote expr)."""
        quote_line = self.line
        self._advance()  # consume quote

        self._skip_newlines()
        if self.current_token is None:
            raise FLangParseError(
                message="Unexpected end of input",
                received="Quote symbol ' with nothing to quote",
                expected="Expression after quote symbol",
                example="Correct: '(a b c) or 'symbol",
                line=quote_line
            )

        quoted = self.parse_element()
        return FLangASTList((FLangASTAtom("quote", line=quote_line), quoted), line=quote_line)

    def _synchronize(self) -> None:
        """
        Skip to the next statement after an error.

        Stops at a line break or before a '('.  Closing parens that belong to
        the broken expression are consumed on the way.
        """
        depth = self._open_depth
        self._open_depth = 0

        while self.current_token is not None:
            token_type = self.current_token.type
            if token_type in (FLangTokenType.NEWLINE, FLangTokenType.LPAREN):
                return

            self._advance()
            if token_type == FLangTokenType.RPAREN:
                depth -= 1
                if depth <= 0:
                    return

    def _skip_newlines(self) -> None:
        """Skip line breaks, counting lines as we go."""
        while self.current_token is not None and self.current_token.type == FLangTokenType.NEWLINE:
            self._advance()

    def _advance(self) -> None:
        """Move to the next token."""
        if self.current_token is not None and self.current_token.type == FLangTokenType.NEWLINE:
            self.line += 1

        self.pos += 1
        if self.pos < len(self.tokens):
            self.current_token = self.tokens[self.pos]

        else:
            self.current_token = None
