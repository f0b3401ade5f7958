"""Naming conventions for generated lexer and parser classes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    """Role of a generated class; the value is its class-name suffix."""

    LEXER = "Lexer"
    PARSER = "Parser"

    def __str__(self) -> str:
        return self.value.lower()


def qualified_name(namespace: str, grammar_name: str, suffix: str) -> str:
    """Build the fully qualified class name for a grammar component.

    >>> qualified_name("foo.bar", "Snafu", "Lexer")
    'foo.bar.SnafuLexer'
    >>> qualified_name("", "Snafu", "Parser")
    'SnafuParser'
    """
    if namespace:
        return f"{namespace}.{grammar_name}{suffix}"
    return f"{grammar_name}{suffix}"


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split *name* into the module to import and the class attribute.

    ANTLR's Python target writes each generated class to a module of the
    same name, so ``foo.SnafuLexer`` lives in module ``foo.SnafuLexer``.
    """
    return name, name.rpartition(".")[2]


@dataclass(frozen=True)
class GrammarIdentity:
    """Which grammar to test, and the package its classes were generated into."""

    grammar_name: str
    namespace: str = ""

    def __post_init__(self) -> None:
        if not self.grammar_name:
            raise ValueError("Grammar name must not be empty")

    def name_for(self, role: Role) -> str:
        return qualified_name(self.namespace, self.grammar_name, role.value)

    @property
    def lexer_name(self) -> str:
        return self.name_for(Role.LEXER)

    @property
    def parser_name(self) -> str:
        return self.name_for(Role.PARSER)
