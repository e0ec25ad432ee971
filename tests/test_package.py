"""Tests for RPC response deserialization."""
import json

import pytest

from cower.core.errors import DeserializeError, RegistryError
from cower.core.package import dump_envelope, parse_envelope, parse_records
from conftest import SEARCH_RESULTS, envelope


def _record(**overrides):
    rec = dict(SEARCH_RESULTS[3])
    rec.update(overrides)
    return rec


def test_parsing_info(cower_json):
    records = parse_records(cower_json)
    assert len(records) == 1

    pkg = records[0]
    assert pkg.package_id == 229417
    assert pkg.name == "cower"
    assert pkg.package_base_id == 44921
    assert pkg.package_base == "cower"
    assert pkg.version == "14-2"
    assert pkg.description == "A simple AUR agent with a pretentious name"
    assert pkg.url == "http://github.com/falconindy/cower"
    assert pkg.votes == 590
    assert pkg.popularity == 24.595536
    assert pkg.out_of_date is None
    assert pkg.maintainer == "falconindy"
    assert pkg.first_submitted == 1293676237
    assert pkg.last_modified == 1441804093
    assert pkg.url_path == "/cgit/aur.git/snapshot/cower.tar.gz"
    assert pkg.depends == ("curl", "openssl", "pacman", "yajl")
    assert pkg.makedepends == ("perl",)
    assert pkg.licenses == ("MIT",)
    assert pkg.keywords == ()


def test_parsing_search_keeps_order(search_json):
    records = parse_records(search_json)
    assert len(records) == 4
    assert [p.package_id for p in records] == [266495, 266497, 404277, 404289]


def test_omitted_lists_default_to_empty(search_json):
    pkg = parse_records(search_json)[0]
    for attr in ("licenses", "conflicts", "depends", "groups", "makedepends",
                 "optdepends", "checkdepends", "provides", "replaces", "keywords"):
        assert getattr(pkg, attr) == ()


def test_envelope_metadata(search_json):
    env = parse_envelope(search_json)
    assert env.version == 5
    assert env.query_type == "search"
    assert env.result_count == 4


def test_round_trip(cower_json):
    env = parse_envelope(cower_json)
    again = parse_envelope(dump_envelope(env))
    assert again == env


def test_orphan_and_out_of_date():
    body = envelope([_record(Maintainer=None, OutOfDate=1500000000)])
    pkg = parse_records(body)[0]
    assert pkg.maintainer is None
    assert pkg.out_of_date == 1500000000


def test_maintainer_and_out_of_date_may_be_absent():
    rec = _record()
    del rec["Maintainer"]
    del rec["OutOfDate"]
    pkg = parse_records(envelope([rec]))[0]
    assert pkg.maintainer is None
    assert pkg.out_of_date is None


def test_null_description_and_url():
    pkg = parse_records(envelope([_record(Description=None, URL=None)]))[0]
    assert pkg.description is None
    assert pkg.url is None


def test_integer_popularity_is_float():
    pkg = parse_records(envelope([_record(Popularity=0)]))[0]
    assert pkg.popularity == 0.0
    assert isinstance(pkg.popularity, float)


@pytest.mark.parametrize("key", ["Name", "Version", "ID", "NumVotes", "Popularity",
                                 "PackageBase", "URLPath", "FirstSubmitted", "LastModified"])
def test_missing_required_field(key):
    rec = _record()
    del rec[key]
    with pytest.raises(DeserializeError) as exc:
        parse_records(envelope([rec]))
    assert exc.value.field == f"results[0].{key}"


@pytest.mark.parametrize("key,value", [
    ("Name", 5),
    ("NumVotes", "997"),
    ("NumVotes", True),
    ("Popularity", "high"),
    ("ID", 1.5),
    ("OutOfDate", "yesterday"),
    ("Maintainer", 42),
    ("Depends", "curl"),
    ("Depends", ["curl", 3]),
])
def test_mistyped_field(key, value):
    with pytest.raises(DeserializeError) as exc:
        parse_records(envelope([_record(**{key: value})]))
    assert exc.value.field == f"results[0].{key}"


def test_error_names_record_index():
    rec = _record()
    del rec["Version"]
    with pytest.raises(DeserializeError) as exc:
        parse_records(envelope([_record(), rec]))
    assert exc.value.field == "results[1].Version"


@pytest.mark.parametrize("body", ["", "{not json", "[]", '"results"'])
def test_malformed_json(body):
    with pytest.raises(DeserializeError):
        parse_records(body)


@pytest.mark.parametrize("key", ["version", "type", "resultcount", "results"])
def test_missing_envelope_field(key):
    doc = json.loads(envelope(SEARCH_RESULTS))
    del doc[key]
    with pytest.raises(DeserializeError) as exc:
        parse_records(json.dumps(doc))
    assert exc.value.field == key


def test_error_envelope():
    body = json.dumps({"version": 5, "type": "error", "resultcount": 0,
                       "results": [], "error": "Incorrect request type specified."})
    with pytest.raises(RegistryError):
        parse_records(body)


def test_accepts_bytes(search_json):
    assert len(parse_records(search_json.encode())) == 4
