"""AUR RPC response model - query envelope and package records.

Records are built strictly: a required key that is missing or carries the
wrong JSON type raises DeserializeError naming the key, and no partially
populated record is ever returned. List fields the registry omits default
to empty tuples.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from cower.core.errors import DeserializeError, RegistryError

# (attribute, JSON key)
_REQUIRED_STR = (
    ("name", "Name"),
    ("package_base", "PackageBase"),
    ("url_path", "URLPath"),
    ("version", "Version"),
)
# Present in every record, but the registry sends null for some packages.
_NULLABLE_STR = (
    ("description", "Description"),
    ("url", "URL"),
)
_REQUIRED_INT = (
    ("package_id", "ID"),
    ("package_base_id", "PackageBaseID"),
    ("votes", "NumVotes"),
    ("first_submitted", "FirstSubmitted"),
    ("last_modified", "LastModified"),
)
_LIST_FIELDS = (
    ("licenses", "License"),
    ("conflicts", "Conflicts"),
    ("depends", "Depends"),
    ("groups", "Groups"),
    ("makedepends", "MakeDepends"),
    ("optdepends", "OptDepends"),
    ("checkdepends", "CheckDepends"),
    ("provides", "Provides"),
    ("replaces", "Replaces"),
    ("keywords", "Keywords"),
)


@dataclass(frozen=True)
class AURPackage:
    """One registry record."""
    package_id: int
    package_base_id: int
    name: str
    package_base: str
    version: str
    description: str | None
    url: str | None
    url_path: str
    maintainer: str | None
    votes: int
    popularity: float
    out_of_date: int | None
    first_submitted: int
    last_modified: int
    licenses: tuple[str, ...] = field(default_factory=tuple)
    conflicts: tuple[str, ...] = field(default_factory=tuple)
    depends: tuple[str, ...] = field(default_factory=tuple)
    groups: tuple[str, ...] = field(default_factory=tuple)
    makedepends: tuple[str, ...] = field(default_factory=tuple)
    optdepends: tuple[str, ...] = field(default_factory=tuple)
    checkdepends: tuple[str, ...] = field(default_factory=tuple)
    provides: tuple[str, ...] = field(default_factory=tuple)
    replaces: tuple[str, ...] = field(default_factory=tuple)
    keywords: tuple[str, ...] = field(default_factory=tuple)

    def to_json(self) -> dict[str, Any]:
        """Return the record in the registry's own key layout."""
        data: dict[str, Any] = {
            "ID": self.package_id,
            "PackageBaseID": self.package_base_id,
            "Name": self.name,
            "PackageBase": self.package_base,
            "Version": self.version,
            "Description": self.description,
            "URL": self.url,
            "URLPath": self.url_path,
            "Maintainer": self.maintainer,
            "NumVotes": self.votes,
            "Popularity": self.popularity,
            "OutOfDate": self.out_of_date,
            "FirstSubmitted": self.first_submitted,
            "LastModified": self.last_modified,
        }
        for attr, key in _LIST_FIELDS:
            data[key] = list(getattr(self, attr))
        return data


@dataclass(frozen=True)
class QueryEnvelope:
    """Top-level wrapper of an RPC response."""
    version: int
    query_type: str
    result_count: int
    results: tuple[AURPackage, ...]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(obj: dict, key: str, where: str) -> Any:
    if key not in obj:
        raise DeserializeError("missing field", field=f"{where}{key}")
    return obj[key]


def _get_str(obj: dict, key: str, where: str, nullable: bool = False) -> str | None:
    value = _require(obj, key, where)
    if value is None and nullable:
        return None
    if not isinstance(value, str):
        raise DeserializeError(f"expected string, got {type(value).__name__}", field=f"{where}{key}")
    return value


def _get_int(obj: dict, key: str, where: str, nullable: bool = False) -> int | None:
    value = _require(obj, key, where)
    if value is None and nullable:
        return None
    if not _is_int(value):
        raise DeserializeError(f"expected integer, got {type(value).__name__}", field=f"{where}{key}")
    return value


def _get_float(obj: dict, key: str, where: str) -> float:
    value = _require(obj, key, where)
    if not (_is_int(value) or isinstance(value, float)):
        raise DeserializeError(f"expected number, got {type(value).__name__}", field=f"{where}{key}")
    return float(value)


def _get_list(obj: dict, key: str, where: str) -> tuple[str, ...]:
    value = obj.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DeserializeError("expected list of strings", field=f"{where}{key}")
    return tuple(value)


def _parse_package(obj: Any, index: int) -> AURPackage:
    where = f"results[{index}]."
    if not isinstance(obj, dict):
        raise DeserializeError("expected object", field=f"results[{index}]")

    kwargs: dict[str, Any] = {}
    for attr, key in _REQUIRED_STR:
        kwargs[attr] = _get_str(obj, key, where)
    for attr, key in _NULLABLE_STR:
        kwargs[attr] = _get_str(obj, key, where, nullable=True)
    for attr, key in _REQUIRED_INT:
        kwargs[attr] = _get_int(obj, key, where)
    kwargs["popularity"] = _get_float(obj, "Popularity", where)

    # Orphaned packages have no maintainer and fresh ones no out-of-date
    # flag; both may be null or left out entirely.
    maintainer = obj.get("Maintainer")
    if maintainer is not None and not isinstance(maintainer, str):
        raise DeserializeError("expected string or null", field=f"{where}Maintainer")
    kwargs["maintainer"] = maintainer

    out_of_date = obj.get("OutOfDate")
    if out_of_date is not None and not _is_int(out_of_date):
        raise DeserializeError("expected integer or null", field=f"{where}OutOfDate")
    kwargs["out_of_date"] = out_of_date

    for attr, key in _LIST_FIELDS:
        kwargs[attr] = _get_list(obj, key, where)

    return AURPackage(**kwargs)


def parse_envelope(data: str | bytes) -> QueryEnvelope:
    """Deserialize a complete RPC response."""
    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DeserializeError(f"invalid JSON: {e}") from e

    if not isinstance(doc, dict):
        raise DeserializeError("expected object at top level")

    query_type = _get_str(doc, "type", "")
    if query_type == "error":
        raise RegistryError(str(doc.get("error") or "unknown registry error"))

    version = _get_int(doc, "version", "")
    result_count = _get_int(doc, "resultcount", "")
    results = _require(doc, "results", "")
    if not isinstance(results, list):
        raise DeserializeError("expected array", field="results")

    return QueryEnvelope(
        version=version,
        query_type=query_type,
        result_count=result_count,
        results=tuple(_parse_package(r, i) for i, r in enumerate(results)),
    )


def parse_records(data: str | bytes) -> list[AURPackage]:
    """Deserialize a response and return its records in response order."""
    return list(parse_envelope(data).results)


def dump_envelope(envelope: QueryEnvelope) -> str:
    """Serialize an envelope back to the registry's JSON layout."""
    return json.dumps({
        "version": envelope.version,
        "type": envelope.query_type,
        "resultcount": envelope.result_count,
        "results": [p.to_json() for p in envelope.results],
    })
