"""Terminal rendering - search lines, info blocks, update lines and --format strings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import click

from cower.core.package import AURPackage

INFO_LABEL_WIDTH = 15
_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\"}


def _style(text: str, color: bool, **kwargs) -> str:
    return click.style(text, **kwargs) if color else text


def format_timestamp(ts: int | None) -> str:
    if ts is None:
        return ""
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _version(pkg: AURPackage, color: bool) -> str:
    fg = "red" if pkg.out_of_date is not None else "green"
    return _style(pkg.version, color, fg=fg, bold=True)


def format_search(pkg: AURPackage, color: bool = False, quiet: bool = False) -> str:
    """One search hit: ``aur/name version (votes, popularity)`` plus the description."""
    if quiet:
        return _style(pkg.name, color, bold=True)
    head = (
        f"{_style('aur/', color, fg='magenta', bold=True)}"
        f"{_style(pkg.name, color, bold=True)} {_version(pkg, color)} "
        f"({pkg.votes}, {pkg.popularity:.2f})"
    )
    return f"{head}\n    {pkg.description or ''}"


def format_info(
    pkg: AURPackage,
    base_url: str,
    delim: str = "  ",
    color: bool = False,
    quiet: bool = False,
) -> str:
    """Labelled info block for one package."""
    if quiet:
        return _style(pkg.name, color, bold=True)

    def join(values) -> str:
        return delim.join(values) if values else "None"

    rows: list[tuple[str, str]] = [
        ("Repository", _style("aur", color, fg="magenta", bold=True)),
        ("Name", _style(pkg.name, color, bold=True)),
        ("Version", _version(pkg, color)),
        ("URL", pkg.url or "None"),
        ("AUR Page", f"{base_url}/packages/{pkg.name}"),
        ("Keywords", join(pkg.keywords)),
        ("Groups", join(pkg.groups)),
        ("Provides", join(pkg.provides)),
        ("Depends On", join(pkg.depends)),
        ("Makedepends", join(pkg.makedepends)),
        ("Checkdepends", join(pkg.checkdepends)),
        ("Optional Deps", join(pkg.optdepends)),
        ("Conflicts With", join(pkg.conflicts)),
        ("Replaces", join(pkg.replaces)),
        ("Licenses", join(pkg.licenses)),
        ("Votes", str(pkg.votes)),
        ("Popularity", f"{pkg.popularity:.2f}"),
        ("Maintainer", pkg.maintainer or "(orphan)"),
        ("Submitted", format_timestamp(pkg.first_submitted)),
        ("Last Modified", format_timestamp(pkg.last_modified)),
    ]
    if pkg.out_of_date is not None:
        rows.append(("Out of Date", _style(format_timestamp(pkg.out_of_date), color, fg="red")))
    rows.append(("Description", pkg.description or ""))

    lines = [f"{_style(label.ljust(INFO_LABEL_WIDTH), color, bold=True)}: {value}" for label, value in rows]
    return "\n".join(lines) + "\n"


def format_update(name: str, local: str, remote: str, color: bool = False, quiet: bool = False) -> str:
    if quiet:
        return name
    return (
        f"{_style(':: ', color, fg='blue', bold=True)}{_style(name, color, bold=True)} "
        f"{_style(local, color, fg='red', bold=True)} -> {_style(remote, color, fg='green', bold=True)}"
    )


def _directives(delim: str) -> dict[str, Callable[[AURPackage], str]]:
    def lst(attr: str) -> Callable[[AURPackage], str]:
        return lambda p: delim.join(getattr(p, attr))

    return {
        "a": lambda p: format_timestamp(p.last_modified),
        "b": lambda p: p.package_base,
        "d": lambda p: p.description or "",
        "i": lambda p: str(p.package_id),
        "m": lambda p: p.maintainer or "(orphan)",
        "n": lambda p: p.name,
        "o": lambda p: str(p.votes),
        "p": lambda p: f"{p.popularity:.2f}",
        "s": lambda p: format_timestamp(p.first_submitted),
        "t": lambda p: "yes" if p.out_of_date is not None else "no",
        "u": lambda p: p.url or "",
        "v": lambda p: p.version,
        "w": lambda p: p.url_path,
        "C": lst("conflicts"),
        "D": lst("depends"),
        "G": lst("groups"),
        "K": lst("keywords"),
        "L": lst("licenses"),
        "M": lst("makedepends"),
        "O": lst("optdepends"),
        "P": lst("provides"),
        "R": lst("replaces"),
    }


def expand_format(fmt: str, pkg: AURPackage, delim: str = "  ") -> str:
    """Expand ``%x`` directives and ``\\n``/``\\t`` escapes for one package."""
    directives = _directives(delim)
    out: list[str] = []
    i = 0
    while i < len(fmt):
        c = fmt[i]
        nxt = fmt[i + 1] if i + 1 < len(fmt) else ""
        if c == "%" and nxt:
            if nxt == "%":
                out.append("%")
            elif nxt in directives:
                out.append(directives[nxt](pkg))
            else:
                out.append(c + nxt)
            i += 2
        elif c == "\\" and nxt in _ESCAPES:
            out.append(_ESCAPES[nxt])
            i += 2
        else:
            out.append(c)
            i += 1
    return "".join(out)
