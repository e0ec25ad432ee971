"""Pacman backend - wraps pacman commands for local and sync database lookups."""

from __future__ import annotations

import subprocess
from typing import Sequence

from cower.core.logger import get_logger

_log = get_logger("pacman_backend")


def _run(cmd: Sequence[str], timeout: int = 30) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            cmd, capture_output=True, text=True, timeout=timeout
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        _log.warning("%s failed: %s", cmd[0], e)
        return None


def list_foreign() -> dict[str, str]:
    """Map name -> version for installed packages found in no sync repo."""
    result = _run(["pacman", "-Qm"])
    if result is None:
        return {}
    packages: dict[str, str] = {}
    for line in result.stdout.strip().splitlines():
        parts = line.split()
        if len(parts) >= 2:
            packages[parts[0]] = parts[1]
    return packages


def unsatisfied(deps: Sequence[str]) -> list[str]:
    """Return the entries of ``deps`` that nothing installed provides."""
    if not deps:
        return []
    result = _run(["pacman", "-T", *deps])
    if result is None:
        return list(deps)
    missing = set(result.stdout.split())
    return [d for d in deps if d in missing]


def sync_repository(name: str) -> str | None:
    """Return the sync repo that would supply ``name``, or None."""
    result = _run(["pacman", "-Sp", "--print-format", "%r", name])
    if result is None or result.returncode != 0:
        return None
    lines = result.stdout.strip().splitlines()
    return lines[-1].strip() if lines else None


def in_repos(name: str, ignore_repos: frozenset[str] = frozenset()) -> bool:
    """True if a sync repo outside ``ignore_repos`` provides ``name``.

    ``*`` in ``ignore_repos`` ignores every repo.
    """
    if "*" in ignore_repos:
        return False
    repo = sync_repository(name)
    if repo is None:
        return False
    if repo in ignore_repos:
        _log.debug("%s is in ignored repo %s", name, repo)
        return False
    return True
