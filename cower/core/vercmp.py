"""Package version ordering, following pacman's vercmp rules.

A full version has the shape ``[epoch:]pkgver[-pkgrel]``. Epochs compare
first, then pkgver, then pkgrel (only when both sides carry one). Each
component is split into alternating runs of digits and letters; digit runs
compare numerically, letter runs compare lexically, and any other character
acts as a separator.
"""

from __future__ import annotations

import string

_DIGITS = frozenset(string.digits)
_ALPHA = frozenset(string.ascii_letters)
_ALNUM = _DIGITS | _ALPHA


def _parse_evr(evr: str) -> tuple[str, str, str | None]:
    """Split a version into (epoch, pkgver, pkgrel)."""
    i = 0
    while i < len(evr) and evr[i] in _DIGITS:
        i += 1

    if i < len(evr) and evr[i] == ":":
        epoch = evr[:i] or "0"
        rest = evr[i + 1:]
    else:
        epoch = "0"
        rest = evr

    version, sep, release = rest.rpartition("-")
    if not sep:
        return epoch, rest, None
    return epoch, version, release


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def rpmvercmp(a: str, b: str) -> int:
    """Compare a single version component. Returns -1, 0 or 1."""
    if a == b:
        return 0

    one = two = 0
    len1, len2 = len(a), len(b)

    while one < len1 and two < len2:
        sep1 = one
        sep2 = two
        while one < len1 and a[one] not in _ALNUM:
            one += 1
        while two < len2 and b[two] not in _ALNUM:
            two += 1

        if one == len1 or two == len2:
            break

        # differing separator lengths decide on their own
        if one - sep1 != two - sep2:
            return -1 if one - sep1 < two - sep2 else 1

        end1, end2 = one, two
        if a[one] in _DIGITS:
            charset = _DIGITS
            isnum = True
        else:
            charset = _ALPHA
            isnum = False
        while end1 < len1 and a[end1] in charset:
            end1 += 1
        while end2 < len2 and b[end2] in charset:
            end2 += 1

        # segment types differ: numbers are newer than letters
        if two == end2:
            return 1 if isnum else -1

        seg1 = a[one:end1]
        seg2 = b[two:end2]
        if isnum:
            seg1 = seg1.lstrip("0")
            seg2 = seg2.lstrip("0")
            if len(seg1) != len(seg2):
                return 1 if len(seg1) > len(seg2) else -1

        if seg1 != seg2:
            return 1 if seg1 > seg2 else -1

        one, two = end1, end2

    if one == len1 and two == len2:
        return 0

    # A remaining letter run never beats an exhausted string, while a
    # remaining digit run (or separator) does.
    rest1 = a[one] if one < len1 else ""
    rest2 = b[two] if two < len2 else ""
    if (not rest1 and rest2 not in _ALPHA) or (rest1 and rest1 in _ALPHA):
        return -1
    return 1


def vercmp(a: str, b: str) -> int:
    """Compare two full package versions. Returns -1, 0 or 1."""
    if a == b:
        return 0

    epoch1, ver1, rel1 = _parse_evr(a)
    epoch2, ver2, rel2 = _parse_evr(b)

    ret = rpmvercmp(epoch1, epoch2)
    if ret == 0:
        ret = rpmvercmp(ver1, ver2)
        if ret == 0 and rel1 is not None and rel2 is not None:
            ret = rpmvercmp(rel1, rel2)
    return _sign(ret)
