"""Application object - runs the selected operations against the AUR."""

from __future__ import annotations

import re
from typing import Callable

import click

from cower.core import pacman_backend
from cower.core.aur_client import AURClient, Endpoint, SearchBy
from cower.core.config import Operation, RunConfig, literal_search_term
from cower.core.downloader import Downloader, DownloadResult
from cower.core.errors import CowerError
from cower.core.logger import get_logger
from cower.core.package import AURPackage
from cower.core.ranking import rank
from cower.core.vercmp import vercmp
from cower.ui.output import expand_format, format_info, format_search, format_update

_log = get_logger("app")


class CowerApp:
    """Runs one frozen RunConfig. ``run()`` returns the process exit status."""

    def __init__(self, config: RunConfig, client: AURClient | None = None) -> None:
        self.config = config
        self.client = client or AURClient(Endpoint(domain=config.aur_domain), timeout=config.timeout)
        self._failed = False

    def run(self) -> int:
        ops = self.config.operations
        if ops == Operation.SEARCH:
            self.search()
        elif ops == Operation.INFO:
            self.info()
        elif Operation.UPDATE in ops:
            self.update()
        else:
            self.download(self._lookup(list(self.config.args)))
        return 1 if self._failed else 0

    # ── Helpers ──
    def _error(self, msg: str) -> None:
        self._failed = True
        click.echo(f"error: {msg}", err=True)

    def _visible(self, packages: list[AURPackage]) -> list[AURPackage]:
        if self.config.ignore_ood:
            packages = [p for p in packages if p.out_of_date is None]
        return rank(packages, self.config.sort_key, self.config.sort_order)

    def _emit(self, pkg: AURPackage, render: Callable[[AURPackage], str]) -> None:
        if self.config.format:
            click.echo(expand_format(self.config.format, pkg, self.config.delim), nl=False)
        else:
            click.echo(render(pkg))

    def _lookup(self, names: list[str]) -> list[AURPackage]:
        """Info query that reports names the registry does not know."""
        if not names:
            return []
        results = self.client.info(names)
        found = {p.name for p in results}
        for name in names:
            if name not in found:
                self._error(f"no results found for {name}")
        return results

    # ── Operations ──
    def search(self) -> None:
        cfg = self.config
        hits: dict[int, AURPackage] = {}
        for target in cfg.args:
            if cfg.regex_allowed:
                pattern = re.compile(target, re.IGNORECASE)
                term = literal_search_term(target)
            else:
                pattern = None
                term = target
            for pkg in self.client.search(term, cfg.search_by):
                if pattern is not None and not self._matches(pattern, pkg):
                    continue
                hits.setdefault(pkg.package_id, pkg)

        results = self._visible(list(hits.values()))
        if not results:
            self._failed = True
        for pkg in results:
            self._emit(pkg, lambda p: format_search(p, cfg.color, cfg.quiet))

    def _matches(self, pattern: re.Pattern[str], pkg: AURPackage) -> bool:
        if pattern.search(pkg.name):
            return True
        return (
            self.config.search_by is SearchBy.NAME_DESC
            and pkg.description is not None
            and pattern.search(pkg.description) is not None
        )

    def info(self) -> None:
        cfg = self.config
        base_url = self.client.endpoint.base_url
        for pkg in self._visible(self._lookup(list(cfg.args))):
            self._emit(pkg, lambda p: format_info(p, base_url, cfg.delim, cfg.color, cfg.quiet))

    def update(self) -> None:
        cfg = self.config
        foreign = pacman_backend.list_foreign()
        if cfg.args:
            foreign = {n: v for n, v in foreign.items() if n in cfg.args}

        names = []
        for name in foreign:
            if name in cfg.ignore_pkgs:
                _log.info("%s: ignoring package upgrade", name)
                continue
            names.append(name)
        if not names:
            return

        updates = [
            p for p in self.client.info(names)
            if vercmp(foreign[p.name], p.version) < 0
        ]
        rank(updates, cfg.sort_key, cfg.sort_order)
        for pkg in updates:
            click.echo(format_update(pkg.name, foreign[pkg.name], pkg.version, cfg.color, cfg.quiet))

        if Operation.DOWNLOAD in cfg.operations:
            self.download(updates)

    def download(self, packages: list[AURPackage]) -> None:
        cfg = self.config
        if not packages:
            return
        downloader = Downloader(
            self.client,
            cfg.working_dir,
            force=cfg.force,
            max_threads=cfg.max_threads,
            ignore_repos=cfg.ignore_repos,
        )

        def on_done(result: DownloadResult) -> None:
            if cfg.quiet:
                click.echo(result.package.package_base)
            else:
                click.echo(f":: {result.package.package_base} downloaded to {result.path.parent}")

        def on_error(pkg: AURPackage, err: CowerError) -> None:
            self._error(str(err))

        if cfg.getdeps:
            downloader.download_with_deps(packages, on_done=on_done, on_error=on_error)
        else:
            downloader.download(packages, on_done=on_done, on_error=on_error)
