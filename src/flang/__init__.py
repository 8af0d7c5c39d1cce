"""FLang: a small parenthesized expression language with closures, loops and eval."""

# Main API
from flang.flang import FLang, FLangRunResult

# Exceptions and diagnostics
from flang.flang_error import (
    FLangError, FLangParseError, FLangEvalError, FLangAnalysisError, FLangDiagnostic, ErrorMessageBuilder
)

# Value types
from flang.flang_value import (
    FLangValue, FLangInteger, FLangReal, FLangBoolean, FLangNull, FLangAtom, FLangList, FLangFunction, FLANG_NULL
)

# AST types
from flang.flang_ast import (
    FLangASTNode, FLangASTAtom, FLangASTInteger, FLangASTReal, FLangASTBoolean, FLangASTNull, FLangASTList,
    FLangNode, ast_from_value
)

# Lower-level components (for advanced usage)
from flang.flang_token import FLangToken, FLangTokenType
from flang.flang_lexer import FLangLexer
from flang.flang_parser import FLangParser
from flang.flang_optimizer import FLangOptimizer
from flang.flang_semantic_analyzer import FLangSemanticAnalyzer
from flang.flang_interpreter import FLangInterpreter
from flang.flang_environment import FLangEnvironment
from flang.flang_symbol_table import FLangSymbolTable, FLangType


__all__ = [
    # Main API
    "FLang", "FLangRunResult",

    # Exceptions and diagnostics
    "FLangError", "FLangParseError", "FLangEvalError", "FLangAnalysisError", "FLangDiagnostic",
    "ErrorMessageBuilder",

    # Value types
    "FLangValue", "FLangInteger", "FLangReal", "FLangBoolean", "FLangNull", "FLangAtom", "FLangList",
    "FLangFunction", "FLANG_NULL",

    # AST types
    "FLangASTNode", "FLangASTAtom", "FLangASTInteger", "FLangASTReal", "FLangASTBoolean", "FLangASTNull",
    "FLangASTList", "FLangNode", "ast_from_value",

    # Lower-level components
    "FLangToken", "FLangTokenType", "FLangLexer", "FLangParser", "FLangOptimizer", "FLangSemanticAnalyzer",
    "FLangInterpreter", "FLangEnvironment", "FLangSymbolTable", "FLangType"
]
