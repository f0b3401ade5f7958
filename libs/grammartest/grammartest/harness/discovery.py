"""Discovery of source files from Ant-style file sets.

Patterns follow the Ant/Maven convention: ``*`` and ``?`` never cross a
directory separator, ``**`` matches any number of directories, and a
pattern ending in ``/`` matches everything below that directory.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    pattern = pattern.replace("\\", "/")
    if pattern.endswith("/"):
        pattern += "**"

    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


# Excluded from every file set unless it opts out, as Maven file sets do.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    # Editor backups and temporaries
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.DS_Store",
    # Version control metadata
    "**/CVS/**",
    "**/.cvsignore",
    "**/RCS/**",
    "**/SCCS/**",
    "**/vssver.scc",
    "**/project.pj",
    "**/.svn/**",
    "**/.arch-ids/**",
    "**/.bzr/**",
    "**/.MySCMServerInfo",
    "**/.metadata/**",
    "**/.hg/**",
    "**/.hgignore",
    "**/.git/**",
    "**/.gitignore",
    "**/.gitattributes",
    "**/BitKeeper/**",
    "**/ChangeSet/**",
    "**/_darcs/**",
    "**/.darcsrepo/**",
    "**/-darcs-backup*",
    "**/.darcs-temp-mail",
)


def matches(relative_path: str, pattern: str) -> bool:
    """Return True if *relative_path* (``/``-separated) matches *pattern*."""
    return _compile(pattern).fullmatch(relative_path) is not None


@dataclass(frozen=True)
class FileSet:
    """A directory plus include and exclude patterns."""

    directory: str
    includes: tuple[str, ...] = ("**",)
    excludes: tuple[str, ...] = ()
    use_default_excludes: bool = True

    @property
    def all_excludes(self) -> tuple[str, ...]:
        if self.use_default_excludes:
            return self.excludes + DEFAULT_EXCLUDES
        return self.excludes

    def included_files(self, base_dir: str | Path | None = None) -> list[str]:
        """Return the matching regular files, relative to the directory, sorted."""
        root = Path(base_dir) / self.directory if base_dir is not None else Path(self.directory)
        if not root.is_dir():
            return []

        included: list[str] = []
        for path in root.rglob("*"):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if not any(matches(relative, p) for p in self.includes):
                continue
            if any(matches(relative, p) for p in self.all_excludes):
                continue
            included.append(relative)
        return sorted(included)


def files_to_test(filesets: Iterable[FileSet], base_dir: str | Path | None = None) -> list[str]:
    """Return ``<directory>/<file>`` for every included file, in file set order."""
    aggregator: list[str] = []
    for fileset in filesets:
        directory = PurePosixPath(Path(base_dir) / fileset.directory if base_dir is not None else fileset.directory)
        for relative in fileset.included_files(base_dir):
            aggregator.append(str(directory / relative))
    return aggregator
