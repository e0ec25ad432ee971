"""AUR RPC v5 client - builds query URLs and fetches/parses responses.

URL construction is pure and validated up front; the network side is a thin
requests wrapper that hands response text to the package model.
"""

from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import requests

from cower import __app_name__, __version__
from cower.core.errors import EmptyArgumentsError, InvalidEndpointError, TransportError
from cower.core.logger import get_logger
from cower.core.package import AURPackage, parse_records

_log = get_logger("aur_client")

AUR_DOMAIN = "aur.archlinux.org"
AUR_SCHEME = "https"
RPC_VERSION = 5
RPC_PATH = "/rpc.php"
# Keep info URLs under the registry's request-line limit.
MAX_INFO_ARGS = 150

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


class SearchBy(Enum):
    NAME = "name"
    NAME_DESC = "name-desc"
    MAINTAINER = "maintainer"


@dataclass(frozen=True)
class Endpoint:
    """Registry location, validated at construction."""
    scheme: str = AUR_SCHEME
    domain: str = AUR_DOMAIN
    rpc_version: int = RPC_VERSION

    def __post_init__(self) -> None:
        url = f"{self.scheme}://{self.domain}"
        if not _SCHEME_RE.match(self.scheme):
            raise InvalidEndpointError(url, "bad scheme")
        if not self.domain or any(c.isspace() for c in self.domain):
            raise InvalidEndpointError(url, "bad domain")
        try:
            parts = urllib.parse.urlsplit(url)
            parts.port  # raises ValueError on a malformed port
        except ValueError as e:
            raise InvalidEndpointError(url, str(e)) from e
        if not parts.hostname or parts.path not in ("", "/") or parts.query or parts.fragment:
            raise InvalidEndpointError(url, "bad domain")

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.domain.rstrip('/')}"

    def _rpc_url(self, params: list[tuple[str, str]]) -> str:
        return f"{self.base_url}{RPC_PATH}?{urllib.parse.urlencode(params)}"

    def build_info_url(self, names: Sequence[str]) -> str:
        """Return the multi-info URL for ``names``, one ``arg[]`` each, in order."""
        if not names:
            raise EmptyArgumentsError()
        params = [("v", str(self.rpc_version)), ("type", "info")]
        for n in names:
            params.append(("arg[]", n))
        return self._rpc_url(params)

    def build_search_url(self, by: SearchBy, term: str) -> str:
        """Return the search URL matching ``term`` against the ``by`` field."""
        params = [
            ("v", str(self.rpc_version)),
            ("type", "search"),
            ("arg", term),
            ("by", by.value),
        ]
        return self._rpc_url(params)

    def snapshot_url(self, pkg: AURPackage) -> str:
        return f"{self.base_url}{pkg.url_path}"


class AURClient:
    """Issues RPC requests against one endpoint."""

    def __init__(self, endpoint: Endpoint | None = None, timeout: int = 10) -> None:
        self.endpoint = endpoint or Endpoint()
        # 0 disables the timeout
        self.timeout = timeout or None
        self.headers = {"User-Agent": f"{__app_name__}/{__version__}"}

    def fetch(self, url: str) -> str:
        _log.debug("GET %s", url)
        try:
            resp = requests.get(url, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"{url}: {e}") from e
        return resp.text

    def info(self, names: Sequence[str]) -> list[AURPackage]:
        """Look up packages by exact name."""
        if not names:
            raise EmptyArgumentsError()
        results: list[AURPackage] = []
        for start in range(0, len(names), MAX_INFO_ARGS):
            batch = names[start:start + MAX_INFO_ARGS]
            url = self.endpoint.build_info_url(batch)
            results.extend(parse_records(self.fetch(url)))
        _log.debug("info: %d names -> %d results", len(names), len(results))
        return results

    def search(self, term: str, by: SearchBy = SearchBy.NAME_DESC) -> list[AURPackage]:
        """Search packages by name, name and description, or maintainer."""
        url = self.endpoint.build_search_url(by, term)
        results = parse_records(self.fetch(url))
        _log.debug("search %r by %s -> %d results", term, by.value, len(results))
        return results
