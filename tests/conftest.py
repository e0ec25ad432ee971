"""Shared pytest configuration and fixtures."""
import json

import pytest

from cower.core.package import AURPackage

COWER_JSON = r"""{
    "version":5,
    "type":"multiinfo",
    "resultcount":1,
    "results":[{
        "ID":229417,
        "Name":"cower",
        "PackageBaseID":44921,
        "PackageBase":"cower",
        "Version":"14-2",
        "Description":"A simple AUR agent with a pretentious name",
        "URL":"http:\/\/github.com\/falconindy\/cower",
        "NumVotes":590,
        "Popularity":24.595536,
        "OutOfDate":null,
        "Maintainer":"falconindy",
        "FirstSubmitted":1293676237,
        "LastModified":1441804093,
        "URLPath":"\/cgit\/aur.git\/snapshot\/cower.tar.gz",
        "Depends":["curl","openssl","pacman","yajl"],
        "MakeDepends":["perl"],
        "License":["MIT"],
        "Keywords":[]
    }]
}"""

SEARCH_RESULTS = [
    {"ID": 266495, "Name": "burgaur", "PackageBaseID": 91085, "PackageBase": "burgaur",
     "Version": "2.2-2", "Description": "A delicious AUR helper. Made from cower.",
     "URL": "https://github.com/m45t3r/burgaur", "NumVotes": 7, "Popularity": 0.000813,
     "OutOfDate": None, "Maintainer": "m45t3r", "FirstSubmitted": 1425574472,
     "LastModified": 1453133491, "URLPath": "/cgit/aur.git/snapshot/burgaur.tar.gz"},
    {"ID": 266497, "Name": "burgaur-git", "PackageBaseID": 91086, "PackageBase": "burgaur-git",
     "Version": "2.2-2", "Description": "A delicious AUR helper. Made from cower.",
     "URL": "https://github.com/m45t3r/burgaur", "NumVotes": 1, "Popularity": 0.004006,
     "OutOfDate": None, "Maintainer": "m45t3r", "FirstSubmitted": 1425574489,
     "LastModified": 1453133995, "URLPath": "/cgit/aur.git/snapshot/burgaur-git.tar.gz"},
    {"ID": 404277, "Name": "cower-git", "PackageBaseID": 35888, "PackageBase": "cower-git",
     "Version": "17-1", "Description": "A simple AUR agent with a pretentious name",
     "URL": "http://github.com/falconindy/cower", "NumVotes": 81, "Popularity": 0.385032,
     "OutOfDate": None, "Maintainer": "falconindy", "FirstSubmitted": 1269401179,
     "LastModified": 1493040653, "URLPath": "/cgit/aur.git/snapshot/cower-git.tar.gz"},
    {"ID": 404289, "Name": "cower", "PackageBaseID": 44921, "PackageBase": "cower",
     "Version": "17-2", "Description": "A simple AUR agent with a pretentious name",
     "URL": "http://github.com/falconindy/cower", "NumVotes": 997, "Popularity": 13.169459,
     "OutOfDate": None, "Maintainer": "falconindy", "FirstSubmitted": 1293676237,
     "LastModified": 1493044041, "URLPath": "/cgit/aur.git/snapshot/cower.tar.gz"},
]

SRCINFO = """
# Generated by mksrcinfo v8
# Wed Mar 28 18:45:02 UTC 2018
pkgbase = aurutils
\tpkgdesc = helper tools for the arch user repository
\tpkgver = 1.5.3
\tpkgrel = 10
\turl = https://github.com/AladW/aurutils
\tarch = any
\tlicense = custom:ISC
\tmakedepends = git
\tdepends = pacman>=5
\tdepends = git
\tdepends = jq
\tdepends = pacutils>=0.4
\toptdepends = devtools: systemd-nspawn support
\toptdepends = vifm: build file interaction
\tsource = aurutils-1.5.3.tar.gz::https://github.com/AladW/aurutils/archive/1.5.3.tar.gz
\tsha256sums = SKIP

pkgname = aurutils
"""


def envelope(results, query_type="search"):
    """Wrap raw result dicts in an RPC response body."""
    return json.dumps({
        "version": 5,
        "type": query_type,
        "resultcount": len(results),
        "results": results,
    })


@pytest.fixture
def cower_json():
    return COWER_JSON


@pytest.fixture
def search_json():
    return envelope(SEARCH_RESULTS)


@pytest.fixture
def srcinfo_text():
    return SRCINFO


@pytest.fixture
def make_pkg():
    """Factory for AURPackage records with sensible defaults."""
    def _make(name="pkg", **overrides):
        fields = dict(
            package_id=1,
            package_base_id=1,
            name=name,
            package_base=name,
            version="1.0-1",
            description=f"{name} description",
            url=f"https://example.org/{name}",
            url_path=f"/cgit/aur.git/snapshot/{name}.tar.gz",
            maintainer="someone",
            votes=0,
            popularity=0.0,
            out_of_date=None,
            first_submitted=1000,
            last_modified=2000,
        )
        fields.update(overrides)
        return AURPackage(**fields)
    return _make


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, text="", status_code=200, content=b""):
        self.text = text
        self.status_code = status_code
        self.content = content or text.encode()

    def raise_for_status(self):
        import requests
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def fake_response():
    return FakeResponse


def make_tarball(pkgbase, srcinfo="", extra=None):
    """Build an in-memory AUR snapshot tarball."""
    import io
    import tarfile

    files = {f"{pkgbase}/PKGBUILD": "pkgname=x\n", f"{pkgbase}/.SRCINFO": srcinfo}
    files.update(extra or {})
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, text in files.items():
            data = text.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()
