"""Result ordering - named comparators over AURPackage and a stable rank()."""

from __future__ import annotations

import math
from enum import Enum
from functools import cmp_to_key
from typing import Callable, MutableSequence

from cower.core.errors import InvalidSortKeyError
from cower.core.package import AURPackage
from cower.core.vercmp import vercmp

Comparator = Callable[[AURPackage, AURPackage], int]


class SortKey(Enum):
    NAME = "name"
    VERSION = "version"
    MAINTAINER = "maintainer"
    VOTES = "votes"
    POPULARITY = "popularity"
    OUT_OF_DATE = "outofdate"
    LAST_MODIFIED = "lastmodified"
    FIRST_SUBMITTED = "firstsubmitted"

    @classmethod
    def from_token(cls, token: str) -> "SortKey":
        try:
            return cls(token.strip())
        except ValueError:
            raise InvalidSortKeyError(token) from None


class SortOrder(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_optional(a, b) -> int:
    """Order values with None before anything present."""
    if a is None or b is None:
        return _cmp(a is not None, b is not None)
    return _cmp(a, b)


def cmp_name(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp(p1.name, p2.name)


def cmp_version(p1: AURPackage, p2: AURPackage) -> int:
    return vercmp(p1.version, p2.version)


def cmp_maintainer(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp_optional(p1.maintainer, p2.maintainer)


def cmp_votes(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp(p1.votes, p2.votes)


def cmp_popularity(p1: AURPackage, p2: AURPackage) -> int:
    # unordered (NaN) pairs count as less
    if math.isnan(p1.popularity) or math.isnan(p2.popularity):
        return -1
    return _cmp(p1.popularity, p2.popularity)


def cmp_out_of_date(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp_optional(p1.out_of_date, p2.out_of_date)


def cmp_last_modified(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp(p1.last_modified, p2.last_modified)


def cmp_first_submitted(p1: AURPackage, p2: AURPackage) -> int:
    return _cmp(p1.first_submitted, p2.first_submitted)


COMPARATORS: dict[SortKey, Comparator] = {
    SortKey.NAME: cmp_name,
    SortKey.VERSION: cmp_version,
    SortKey.MAINTAINER: cmp_maintainer,
    SortKey.VOTES: cmp_votes,
    SortKey.POPULARITY: cmp_popularity,
    SortKey.OUT_OF_DATE: cmp_out_of_date,
    SortKey.LAST_MODIFIED: cmp_last_modified,
    SortKey.FIRST_SUBMITTED: cmp_first_submitted,
}


def rank(
    records: MutableSequence[AURPackage],
    key: SortKey = SortKey.NAME,
    order: SortOrder = SortOrder.FORWARD,
) -> MutableSequence[AURPackage]:
    """Sort ``records`` in place and return it.

    The sort is stable in both directions: Reverse flips the comparator's
    sign rather than reversing the output, so ties keep response order.
    """
    cmp = COMPARATORS[key]
    if order is SortOrder.REVERSE:
        def effective(a: AURPackage, b: AURPackage) -> int:
            return -cmp(a, b)
    else:
        effective = cmp

    records[:] = sorted(records, key=cmp_to_key(effective))
    return records
