"""Run configuration - defaults, config-file overrides, command-line overrides, freeze.

A ConfigBuilder starts from DEFAULTS, has the config file and then the
command line applied to it, and is frozen into an immutable RunConfig once
the operation set has been validated.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Flag, auto
from pathlib import Path
from typing import Any, TextIO

from cower.core.aur_client import AUR_DOMAIN, SearchBy
from cower.core.errors import (
    ConfigFileError,
    InvalidColorError,
    InvalidIntegerError,
    InvalidOperationError,
    InvalidRegexError,
    InvalidSearchFieldError,
    TargetDirError,
)
from cower.core.logger import get_logger
from cower.core.ranking import SortKey, SortOrder

_log = get_logger("config")

DEFAULTS: dict[str, Any] = {
    "aur_domain": AUR_DOMAIN,
    "search_by": SearchBy.NAME_DESC,
    "delim": "  ",
    "format": "",
    "log_level": logging.WARNING,
    "color": False,
    "sort_key": SortKey.NAME,
    "sort_order": SortOrder.FORWARD,
    "max_threads": 10,
    "timeout": 10,
}

# Regex searches are reduced to their longest literal run for the registry,
# which needs at least this many characters to answer.
MIN_SEARCH_TERM = 2


class Operation(Flag):
    SEARCH = auto()
    INFO = auto()
    DOWNLOAD = auto()
    UPDATE = auto()


_NONE = Operation(0)
_UPDOWN = Operation.UPDATE | Operation.DOWNLOAD


def validate_operations(ops: Operation) -> None:
    """Reject operation sets that cannot run together.

    Info and search are single-purpose; update and download are the only
    operations that combine.
    """
    if ops == _NONE:
        raise InvalidOperationError("no operation specified")
    if ops in (Operation.INFO, Operation.SEARCH):
        return
    if ops & ~_UPDOWN:
        raise InvalidOperationError("info and search cannot be combined with other operations")


def get_config_path() -> Path | None:
    """Return the config file location if one exists."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        path = Path(xdg) / "cower" / "config"
    else:
        path = Path.home() / ".config" / "cower" / "config"
    return path if path.is_file() else None


def _parse_uint(key: str, value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise InvalidIntegerError(key, value)
    return int(value)


_LITERAL_RUN = re.compile(r"[^.^$*+?{}\[\]\\|()]+")


def literal_search_term(pattern: str) -> str:
    """Return the longest run of regex-literal characters in ``pattern``."""
    runs = _LITERAL_RUN.findall(pattern)
    return max(runs, key=len) if runs else ""


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one invocation."""
    aur_domain: str
    search_by: SearchBy
    working_dir: Path
    delim: str
    format: str
    operations: Operation
    log_level: int
    color: bool
    sort_key: SortKey
    sort_order: SortOrder
    force: bool
    getdeps: bool
    literal: bool
    quiet: bool
    ignore_ood: bool
    from_srcinfo: bool
    max_threads: int
    timeout: int
    ignore_pkgs: frozenset[str] = field(default_factory=frozenset)
    ignore_repos: frozenset[str] = field(default_factory=frozenset)
    args: tuple[str, ...] = ()

    @property
    def regex_allowed(self) -> bool:
        return (
            Operation.SEARCH in self.operations
            and not self.literal
            and self.search_by is not SearchBy.MAINTAINER
        )


class ConfigBuilder:
    """Mutable staging area for a RunConfig."""

    def __init__(self) -> None:
        self.aur_domain: str = DEFAULTS["aur_domain"]
        self.search_by: SearchBy = DEFAULTS["search_by"]
        self.working_dir: Path = Path.cwd()
        self.delim: str = DEFAULTS["delim"]
        self.format: str = DEFAULTS["format"]
        self.operations: Operation = _NONE
        self.log_level: int = DEFAULTS["log_level"]
        self.color: bool = DEFAULTS["color"]
        self.sort_key: SortKey = DEFAULTS["sort_key"]
        self.sort_order: SortOrder = DEFAULTS["sort_order"]
        self.force = False
        self.getdeps = False
        self.literal = False
        self.quiet = False
        self.ignore_ood = False
        self.from_srcinfo = False
        self.max_threads: int = DEFAULTS["max_threads"]
        self.timeout: int = DEFAULTS["timeout"]
        self.ignore_pkgs: list[str] = []
        self.ignore_repos: list[str] = []
        self.args: list[str] = []

    # -- setters shared by the config file and the command line --

    def add_operation(self, op: Operation) -> None:
        self.operations |= op

    def enable_msearch(self) -> None:
        """Search restricted to maintainer names."""
        self.operations |= Operation.SEARCH
        self.search_by = SearchBy.MAINTAINER

    def set_search_field(self, token: str) -> None:
        try:
            self.search_by = SearchBy(token.strip())
        except ValueError:
            raise InvalidSearchFieldError(token) from None

    def set_color_mode(self, token: str, stream: TextIO | None = None) -> None:
        token = token.strip()
        if token == "auto":
            stream = stream if stream is not None else sys.stdout
            self.color = stream.isatty()
        elif token == "always":
            self.color = True
        elif token == "never":
            self.color = False
        else:
            raise InvalidColorError(token)

    def set_sort(self, token: str, reverse: bool = False) -> None:
        self.sort_key = SortKey.from_token(token)
        self.sort_order = SortOrder.REVERSE if reverse else SortOrder.FORWARD

    def set_target_dir(self, value: str | Path) -> None:
        path = Path(value).expanduser()
        if not path.is_absolute():
            raise TargetDirError(str(value), "path not absolute")
        if not path.is_dir():
            raise TargetDirError(str(value), "not valid directory")
        self.working_dir = path

    def set_max_threads(self, value: str) -> None:
        self.max_threads = _parse_uint("MaxThreads", value)

    def set_timeout(self, value: str) -> None:
        self.timeout = _parse_uint("ConnectTimeout", value)

    # -- config file --

    def load_from_file(self, path: str | Path) -> None:
        """Apply ``Key = Value`` lines from the config file at ``path``."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigFileError(f"cannot read {path}: {e}") from e

        for lineno, raw_line in enumerate(text.splitlines(), 1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                _log.warning("%s:%d: ignoring malformed line: %s", path, lineno, line)
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if key == "IgnoreRepo":
                self.ignore_repos.append(value)
            elif key == "IgnorePkg":
                self.ignore_pkgs.append(value)
            elif key == "TargetDir":
                self.set_target_dir(value)
            elif key == "MaxThreads":
                self.set_max_threads(value)
            elif key == "ConnectTimeout":
                self.set_timeout(value)
            elif key == "Color":
                self.set_color_mode(value)
            else:
                _log.warning("ignoring unknown option: %s", key)

    # -- freeze --

    def freeze(self) -> RunConfig:
        """Validate and return the immutable configuration."""
        validate_operations(self.operations)
        config = RunConfig(
            aur_domain=self.aur_domain,
            search_by=self.search_by,
            working_dir=self.working_dir,
            delim=self.delim,
            format=self.format,
            operations=self.operations,
            log_level=self.log_level,
            color=self.color,
            sort_key=self.sort_key,
            sort_order=self.sort_order,
            force=self.force,
            getdeps=self.getdeps,
            literal=self.literal,
            quiet=self.quiet,
            ignore_ood=self.ignore_ood,
            from_srcinfo=self.from_srcinfo,
            max_threads=self.max_threads,
            timeout=self.timeout,
            ignore_pkgs=frozenset(self.ignore_pkgs),
            ignore_repos=frozenset(self.ignore_repos),
            args=tuple(self.args),
        )
        if config.regex_allowed:
            _check_regexes(config.args)
        return config


def _check_regexes(patterns: tuple[str, ...]) -> None:
    bad: list[str] = []
    for p in patterns:
        try:
            re.compile(p)
        except re.error:
            bad.append(p)
            continue
        if len(literal_search_term(p)) < MIN_SEARCH_TERM:
            bad.append(p)
    if bad:
        raise InvalidRegexError(bad)
