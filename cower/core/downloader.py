"""Snapshot downloads - fetch and unpack AUR tarballs, optionally following dependencies.

Downloads run on a thread pool bounded by the MaxThreads setting. With
dependency recursion, each unpacked .SRCINFO feeds the next round of
registry lookups until no unseen, unsatisfied AUR dependency remains.
"""

from __future__ import annotations

import io
import shutil
import tarfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

import requests

from cower.core import pacman_backend, srcinfo
from cower.core.aur_client import AURClient
from cower.core.errors import CowerError, DownloadError
from cower.core.logger import get_logger
from cower.core.package import AURPackage

_log = get_logger("downloader")


@dataclass
class DownloadResult:
    package: AURPackage
    path: Path


def extract_snapshot(data: bytes, dest_root: Path, pkgbase: str) -> Path:
    """Unpack a snapshot tarball under ``dest_root`` and return ``dest_root/pkgbase``.

    Members resolving outside ``dest_root`` are refused by the ``data`` filter.
    """
    root = dest_root.resolve()
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tf:
            tf.extractall(root, filter="data")
    except tarfile.TarError as e:
        raise DownloadError(f"{pkgbase}: bad archive: {e}") from e
    return root / pkgbase


def _dependency_name(dep: str) -> str:
    """Drop an exact version pin: ``libfoo=1.2`` becomes ``libfoo``."""
    return dep.partition("=")[0]


class Downloader:
    """Downloads package snapshots into a working directory."""

    def __init__(
        self,
        client: AURClient,
        working_dir: Path,
        force: bool = False,
        max_threads: int = 10,
        ignore_repos: frozenset[str] = frozenset(),
    ) -> None:
        self.client = client
        self.working_dir = working_dir
        self.force = force
        self.max_threads = max(max_threads, 1)
        self.ignore_repos = ignore_repos

    def download_one(self, pkg: AURPackage) -> DownloadResult:
        dest = self.working_dir / pkg.package_base
        if dest.exists():
            if not self.force:
                raise DownloadError(f"{pkg.package_base}: directory already exists (use --force)")
            _log.info("%s: removing existing %s", pkg.package_base, dest)
            if dest.is_dir() and not dest.is_symlink():
                shutil.rmtree(dest)
            else:
                dest.unlink()

        url = self.client.endpoint.snapshot_url(pkg)
        _log.debug("GET %s", url)
        try:
            resp = requests.get(url, headers=self.client.headers, timeout=self.client.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise DownloadError(f"{pkg.package_base}: {e}") from e

        path = extract_snapshot(resp.content, self.working_dir, pkg.package_base)
        return DownloadResult(package=pkg, path=path)

    def download(
        self,
        packages: Iterable[AURPackage],
        on_done: Callable[[DownloadResult], None] | None = None,
        on_error: Callable[[AURPackage, CowerError], None] | None = None,
    ) -> list[DownloadResult]:
        """Download every distinct package base in ``packages`` concurrently."""
        by_base: dict[str, AURPackage] = {}
        for pkg in packages:
            by_base.setdefault(pkg.package_base, pkg)
        if not by_base:
            return []

        done: list[DownloadResult] = []
        with ThreadPoolExecutor(max_workers=self.max_threads) as pool:
            futures = {pool.submit(self.download_one, p): p for p in by_base.values()}
            for future in as_completed(futures):
                pkg = futures[future]
                try:
                    result = future.result()
                except CowerError as e:
                    _log.debug("%s: download failed: %s", pkg.package_base, e)
                    if on_error is None:
                        raise
                    on_error(pkg, e)
                    continue
                done.append(result)
                if on_done is not None:
                    on_done(result)
        return done

    def _new_dependencies(self, results: Sequence[DownloadResult], seen: set[str]) -> list[str]:
        texts = []
        for r in results:
            manifest = r.path / ".SRCINFO"
            if manifest.is_file():
                texts.append(manifest.read_text(encoding="utf-8"))
            else:
                _log.warning("%s: no .SRCINFO, dependencies not followed", r.package.package_base)

        names = sorted({_dependency_name(d) for d in srcinfo.extract(texts)})
        candidates = [d for d in names if d and d not in seen]
        seen.update(candidates)
        missing = pacman_backend.unsatisfied(candidates)
        return [d for d in missing if not pacman_backend.in_repos(d, self.ignore_repos)]

    def download_with_deps(
        self,
        packages: Sequence[AURPackage],
        on_done: Callable[[DownloadResult], None] | None = None,
        on_error: Callable[[AURPackage, CowerError], None] | None = None,
    ) -> list[DownloadResult]:
        """Download ``packages`` and, transitively, their AUR-only dependencies."""
        seen: set[str] = {p.name for p in packages}
        bases: set[str] = set()
        all_results: list[DownloadResult] = []
        batch = list(packages)
        while batch:
            bases.update(p.package_base for p in batch)
            results = self.download(batch, on_done=on_done, on_error=on_error)
            all_results.extend(results)

            wanted = self._new_dependencies(results, seen)
            if not wanted:
                break
            found = self.client.info(wanted)
            found_names = {p.name for p in found}
            for name in wanted:
                if name not in found_names:
                    _log.warning("dependency %s not found in repos or AUR", name)
            # split packages whose base was already fetched
            batch = [p for p in found if p.package_base not in bases]
        return all_results
