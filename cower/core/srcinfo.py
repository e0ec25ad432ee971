""".SRCINFO parser - extracts build-time dependency names from package manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

DEPENDENCY_KEYS = frozenset({"depends", "checkdepends", "makedepends"})


def get_dependencies(text: str) -> list[str]:
    """Return raw dependency values in file order, version constraints included."""
    deps: list[str] = []
    for line in text.splitlines():
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        if key.strip() in DEPENDENCY_KEYS:
            deps.append(value.strip())
    return deps


def strip_constraint(dep: str) -> str:
    """Cut a dependency at its first ``<`` or ``>``.

    ``pacman>=5`` becomes ``pacman``. A value that starts with an operator
    becomes the empty string, which is returned as is.
    """
    for i, c in enumerate(dep):
        if c in "<>":
            return dep[:i]
    return dep


def extract(texts: Iterable[str]) -> list[str]:
    """Bare dependency names across several manifests, sorted and de-duplicated."""
    names: set[str] = set()
    for text in texts:
        names.update(strip_constraint(d) for d in get_dependencies(text))
    return sorted(names)


def load_targets_from_files(paths: Iterable[str | Path]) -> list[str]:
    """Read each manifest and return the combined dependency names."""
    return extract(Path(p).read_text(encoding="utf-8") for p in paths)
