"""Type resolution over C# syntax trees."""

from autoargs.semantics.model import SemanticModel
from autoargs.semantics.scanner import CSharpScanner
from autoargs.semantics.symbols import FileContext, MemberMatch, SymbolTable, TypeSymbol
from autoargs.semantics.type_inferrer import TypeInferrer

__all__ = [
    "CSharpScanner",
    "FileContext",
    "MemberMatch",
    "SemanticModel",
    "SymbolTable",
    "TypeInferrer",
    "TypeSymbol",
]
