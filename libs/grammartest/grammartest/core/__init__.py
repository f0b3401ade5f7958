"""Core subpackage (Layer 1: depends only on diagnostics)."""

from grammartest.core.errors import (
    ConfigError,
    ConformanceFailure,
    ConstructionError,
    GrammarTestError,
    InvocationError,
    ParseRejected,
    ResolutionError,
    SourceReadError,
)
from grammartest.core.naming import GrammarIdentity, Role, qualified_name
from grammartest.core.symbols import (
    ImplementationSymbol,
    ImportSymbolSpace,
    RegistrySymbolSpace,
    SymbolResolver,
    SymbolSpace,
    resolve,
)

__all__ = [
    "GrammarTestError",
    "ResolutionError",
    "SourceReadError",
    "ConstructionError",
    "InvocationError",
    "ConfigError",
    "ParseRejected",
    "ConformanceFailure",
    "GrammarIdentity",
    "Role",
    "qualified_name",
    "SymbolSpace",
    "ImportSymbolSpace",
    "RegistrySymbolSpace",
    "ImplementationSymbol",
    "SymbolResolver",
    "resolve",
]
