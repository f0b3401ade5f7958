"""Harness configuration loaded from YAML and validated against a JSON schema."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from grammartest.core.errors import ConfigError
from grammartest.core.naming import GrammarIdentity
from grammartest.harness.discovery import FileSet, files_to_test
from grammartest.harness.pipeline import DEFAULT_ENCODING, SourceFile

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_NAME = "grammartest.yaml"
SKIP_ENV = "GRAMMARTEST_SKIP"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class HarnessConfig:
    """Everything one harness run needs to know."""

    start_rule: str
    grammar_name: str
    package_name: str = ""
    encoding: str = DEFAULT_ENCODING
    skip: bool = False
    output_directory: str | None = None
    filesets: tuple[FileSet, ...] = ()
    base_dir: str | None = None

    @property
    def identity(self) -> GrammarIdentity:
        return GrammarIdentity(self.grammar_name, self.package_name)

    def files_to_test(self) -> list[str]:
        return files_to_test(self.filesets, self.base_dir)

    def source_files(self, paths: list[str] | None = None) -> list[SourceFile]:
        """Pair each path (discovered when *paths* is None) with the encoding."""
        if paths is None:
            paths = self.files_to_test()
        return [SourceFile(path, self.encoding) for path in paths]

    def with_overrides(self, **overrides: Any) -> HarnessConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base_dir: str | Path | None = None) -> HarnessConfig:
        """Validate *data* against the schema and build a config from it."""
        validate(data)

        output_directory = data.get("output_directory")
        if output_directory is not None and base_dir is not None:
            output_directory = str(Path(base_dir) / output_directory)

        filesets = tuple(
            FileSet(
                directory=entry["directory"],
                includes=tuple(entry.get("includes") or ("**",)),
                excludes=tuple(entry.get("excludes") or ()),
                use_default_excludes=entry.get("use_default_excludes", True),
            )
            for entry in data.get("filesets", ())
        )

        return cls(
            start_rule=data["start_rule"],
            grammar_name=data["grammar_name"],
            package_name=data.get("package_name", ""),
            encoding=data.get("encoding", DEFAULT_ENCODING),
            skip=data.get("skip", False) or skip_from_env(),
            output_directory=output_directory,
            filesets=filesets,
            base_dir=str(base_dir) if base_dir is not None else None,
        )


def skip_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Return True if the skip environment variable is set to a truthy value."""
    environ = os.environ if environ is None else environ
    return environ.get(SKIP_ENV, "").strip().lower() in _TRUTHY


def load_schema() -> dict:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def validate(data: Any) -> None:
    """Validate raw configuration data.

    Raises:
        ConfigError: naming the offending key path when validation fails.
    """
    try:
        jsonschema.validate(instance=data, schema=load_schema())
    except jsonschema.ValidationError as e:
        where = " -> ".join(str(p) for p in e.path) or "<root>"
        raise ConfigError(f"Invalid configuration at {where}: {e.message}") from e


def load_yaml(path: str | Path) -> dict:
    """Load a YAML mapping from *path*; an empty file yields an empty mapping."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Can not read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: str | Path | None = None, **overrides: Any) -> HarnessConfig:
    """Load configuration from *path* and apply non-None *overrides*.

    Overrides are merged before validation, so required keys may come from
    either source.  Relative directories resolve against the file's directory.
    """
    data: dict[str, Any] = load_yaml(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    base_dir = Path(path).parent if path is not None else None
    return HarnessConfig.from_mapping(data, base_dir)
