"""Resolution of generated lexer and parser classes by name.

The classes under test are produced by the ANTLR tool after this package was
built, so they are looked up at run time from a :class:`SymbolSpace`.  The
space is passed in explicitly; nothing here reaches into a global registry
of its own.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from antlr4 import Lexer, Parser

from grammartest.core.errors import ResolutionError
from grammartest.core.naming import GrammarIdentity, Role, split_qualified_name

logger = logging.getLogger(__name__)

# Required base class per role.
_BASES: dict[Role, type] = {
    Role.LEXER: Lexer,
    Role.PARSER: Parser,
}

# What the single constructor argument is, per role (for error messages).
_STREAM_KINDS: dict[Role, str] = {
    Role.LEXER: "character stream",
    Role.PARSER: "token stream",
}


class SymbolSpace(Protocol):
    """A queryable set of classes keyed by fully qualified name."""

    name: str

    def lookup(self, name: str) -> Any | None:
        """Return the object registered under *name*, or None if absent."""
        ...


class ImportSymbolSpace:
    """Symbol space backed by Python's import system.

    ``search_path`` is the directory the ANTLR tool generated code into.  It
    is put in front of ``sys.path`` only while an import is running.  A module
    counts as found only if its file lies under ``search_path``.  When a
    package of the same name was already imported from somewhere else, it is
    set aside for the import and put back afterwards, so two spaces over two
    builds of one grammar stay independent.
    """

    def __init__(self, search_path: str | Path | None = None) -> None:
        self._search_path = str(Path(search_path).resolve()) if search_path else None
        self._cache: dict[str, Any | None] = {}
        self.name = self._search_path or "sys.path"

    def lookup(self, name: str) -> Any | None:
        if name in self._cache:
            return self._cache[name]

        module_name, attribute = split_qualified_name(name)
        with self._on_search_path(), self._shadowing(module_name):
            importlib.invalidate_caches()
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                # Only a missing target module means "not found"; a generated
                # module failing on its own imports is a real error.
                if exc.name is None or not _is_prefix(exc.name, module_name):
                    raise
                module = None

        if module is not None and not self._owns(module):
            logger.debug("Ignoring '%s' from outside %s.", module_name, self.name)
            module = None

        found = getattr(module, attribute, None) if module is not None else None
        self._cache[name] = found
        return found

    def _owns(self, module: ModuleType) -> bool:
        if self._search_path is None:
            return True
        root = Path(self._search_path)
        locations = list(getattr(module, "__path__", None) or ()) or [getattr(module, "__file__", None)]
        return any(location and Path(location).resolve().is_relative_to(root) for location in locations)

    @contextmanager
    def _on_search_path(self) -> Iterator[None]:
        if self._search_path is None or self._search_path in sys.path:
            yield
            return
        sys.path.insert(0, self._search_path)
        try:
            yield
        finally:
            if self._search_path in sys.path:
                sys.path.remove(self._search_path)

    @contextmanager
    def _shadowing(self, module_name: str) -> Iterator[None]:
        top = module_name.partition(".")[0]
        loaded = sys.modules.get(top)
        if loaded is None or top in sys.stdlib_module_names or self._owns(loaded):
            yield
            return

        shadowed = {key: sys.modules.pop(key) for key in list(sys.modules) if _is_prefix(top, key)}
        try:
            yield
        finally:
            for key in [key for key in sys.modules if _is_prefix(top, key)]:
                del sys.modules[key]
            sys.modules.update(shadowed)


class RegistrySymbolSpace:
    """Symbol space backed by an explicit table of factories."""

    def __init__(self, symbols: Mapping[str, Any] | None = None, name: str = "registry") -> None:
        self._symbols: dict[str, Any] = dict(symbols or {})
        self.name = name

    def register(self, name: str, factory: Any) -> None:
        self._symbols[name] = factory

    def lookup(self, name: str) -> Any | None:
        return self._symbols.get(name)


def _is_prefix(package: str, module_name: str) -> bool:
    return module_name == package or module_name.startswith(package + ".")


@dataclass(frozen=True)
class ImplementationSymbol:
    """A resolved, constructible lexer or parser class."""

    name: str
    role: Role
    factory: type

    def construct(self, stream: Any) -> Any:
        """Instantiate the class over *stream*."""
        return self.factory(stream)


class SymbolResolver:
    """Resolve generated classes from a symbol space and check their shape."""

    def __init__(self, space: SymbolSpace) -> None:
        self._space = space

    def resolve(self, identity: GrammarIdentity, role: Role) -> ImplementationSymbol:
        """Resolve the *role* class of *identity*.

        Raises:
            ResolutionError: if the class is missing, is not an ANTLR
                lexer/parser, or has no single-stream constructor.
        """
        name = identity.name_for(role)
        logger.info("Using %s class '%s'.", role, name)

        try:
            found = self._space.lookup(name)
        except Exception as exc:
            raise ResolutionError(f"Can not create class '{name}' ({exc})!", name) from exc

        if found is None:
            raise ResolutionError(
                f"Can not create class '{name}' (not found in {self._space.name})!", name
            )

        base = _BASES[role]
        if not isinstance(found, type) or not issubclass(found, base):
            raise ResolutionError(
                f"Can not create class '{name}' (not a subclass of antlr4.{base.__name__})!",
                name,
            )

        try:
            inspect.signature(found).bind(None)
        except (TypeError, ValueError) as exc:
            raise ResolutionError(
                f"Can not get constructor for '{name}' "
                f"(expected a single {_STREAM_KINDS[role]} argument: {exc})!",
                name,
            ) from exc

        return ImplementationSymbol(name, role, found)


def resolve(space: SymbolSpace, namespace: str, grammar_name: str, role: Role) -> ImplementationSymbol:
    """Resolve the *role* class of grammar *grammar_name* in *namespace*."""
    return SymbolResolver(space).resolve(GrammarIdentity(grammar_name, namespace), role)
