"""Tests for pacman-style version comparison."""
import itertools

import pytest

from cower.core.vercmp import vercmp

CASES = [
    # all similar length, no pkgrel
    ("1.5.0", "1.5.0", 0),
    ("1.5.1", "1.5.0", 1),
    # mixed length
    ("1.5.1", "1.5", 1),
    # with pkgrel, simple
    ("1.5.0-1", "1.5.0-1", 0),
    ("1.5.0-1", "1.5.0-2", -1),
    ("1.5.0-1", "1.5.1-1", -1),
    ("1.5.0-2", "1.5.1-1", -1),
    # with pkgrel, mixed lengths
    ("1.5-1", "1.5.1-1", -1),
    ("1.5-2", "1.5.1-1", -1),
    ("1.5-2", "1.5.1-2", -1),
    # mixed pkgrel inclusion
    ("1.5", "1.5-1", 0),
    ("1.5-1", "1.5", 0),
    ("1.1-1", "1.1", 0),
    ("1.0-1", "1.1", -1),
    ("1.1-1", "1.0", 1),
    # alphanumeric versions
    ("1.5b-1", "1.5-1", -1),
    ("1.5b", "1.5", -1),
    ("1.5b-1", "1.5", -1),
    ("1.5b", "1.5.1", -1),
    # pre-release ordering
    ("1.0a", "1.0alpha", -1),
    ("1.0alpha", "1.0b", -1),
    ("1.0b", "1.0beta", -1),
    ("1.0beta", "1.0rc", -1),
    ("1.0rc", "1.0", -1),
    # alpha-dotted versions
    ("1.5.a", "1.5", 1),
    ("1.5.b", "1.5.a", 1),
    ("1.5.1", "1.5.b", 1),
    # alpha dots and dashes
    ("1.5.b-1", "1.5.b", 0),
    ("1.5-1", "1.5.b", -1),
    # same content, differing separators
    ("2.0", "2_0", 0),
    ("2.0_a", "2_0.a", 0),
    ("2.0a", "2.0.a", -1),
    ("2___a", "2_a", 1),
    # epochs
    ("0:1.0", "0:1.0", 0),
    ("0:1.0", "0:1.1", -1),
    ("1:1.0", "0:1.0", 1),
    ("1:1.0", "0:1.1", 1),
    ("1:1.0", "2:1.1", -1),
    ("1:1.0", "0:1.0-1", 1),
    ("1:1.0-1", "0:1.1-1", 1),
    ("0:1.0", "1.0", 0),
    ("0:1.0", "1.1", -1),
    ("0:1.1", "1.0", 1),
    ("1:1.0", "1.0", 1),
    ("1:1.0", "1.1", 1),
    ("1:1.1", "1.1", 1),
    # leading zeros and long numbers
    ("1.010", "1.10", 0),
    ("1.0001", "1.1", 0),
    ("20240101", "9999", 1),
]


@pytest.mark.parametrize("a,b,expected", CASES)
def test_vercmp(a, b, expected):
    assert vercmp(a, b) == expected
    assert vercmp(b, a) == -expected


def test_release_ordering():
    assert vercmp("1.0-1", "1.0-2") == -1
    assert vercmp("1.0-2", "2.0-1") == -1
    assert vercmp("1.0", "1.0") == 0


def test_empty_strings():
    assert vercmp("", "") == 0
    assert vercmp("", "1") == -1
    assert vercmp("1", "") == 1


def test_no_digits_compares_lexically():
    assert vercmp("abc", "abd") == -1
    assert vercmp("beta", "alpha") == 1
    assert vercmp("same", "same") == 0


def _versions():
    epochs = ["", "1:"]
    pkgvers = ["1.0a", "1.0b", "1.0rc1", "1.0", "1.0.1", "1.1", "2.0", "10.0"]
    pkgrels = ["1", "2", "10"]
    return [f"{e}{v}-{r}" for e in epochs for v in pkgvers for r in pkgrels]


def test_total_order():
    versions = _versions()
    for a, b in itertools.product(versions, repeat=2):
        assert vercmp(a, b) == -vercmp(b, a)
        assert (vercmp(a, b) == 0) == (a == b)
    for a, b, c in itertools.product(versions, repeat=3):
        if vercmp(a, b) <= 0 and vercmp(b, c) <= 0:
            assert vercmp(a, c) <= 0


def test_sorting_matches_generation_order():
    from functools import cmp_to_key

    versions = _versions()
    shuffled = versions[::-1]
    # generation order is epoch, then pkgver, then pkgrel ascending
    assert sorted(shuffled, key=cmp_to_key(vercmp)) == versions
