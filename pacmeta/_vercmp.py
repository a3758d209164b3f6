"""
A pure-Python version comparator following the distribution's reference
ordering rules for `[epoch:]pkgver[-pkgrel]` strings.

`pacmeta` only ever needs the sign of a comparison, so everything here
returns one of `-1`, `0` or `1`.
"""

from __future__ import annotations

import string
from typing import Callable

VersionComparator = Callable[[str, str], int]
"""
A three-way comparison between two version strings, returning `-1`, `0` or `1`.
"""

_DIGITS = frozenset(string.digits)
_ALPHA = frozenset(string.ascii_letters)
_ALNUM = _DIGITS | _ALPHA


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def _parse_evr(evr: str) -> tuple[str, str, str | None]:
    """
    Split a full version into its `(epoch, version, release)` parts.

    A missing epoch is reported as `"0"`, a missing release as `None`.
    """
    index = 0
    while index < len(evr) and evr[index] in _DIGITS:
        index += 1

    if index < len(evr) and evr[index] == ":":
        epoch = evr[:index] or "0"
        rest = evr[index + 1 :]
    else:
        epoch = "0"
        rest = evr

    version, dash, release = rest.rpartition("-")
    if not dash:
        return epoch, rest, None
    return epoch, version, release


def _segment_cmp(a: str, b: str) -> int:
    """
    Compare two version fragments segment by segment.

    Fragments are split into alternating numeric and alphabetic runs, separated
    by runs of any other characters. Numeric runs are newer than alphabetic ones,
    and a trailing alphabetic run is older than nothing at all (`1.0a < 1.0`).
    """
    if a == b:
        return 0

    one = two = 0
    while one < len(a) and two < len(b):
        sep_one, sep_two = one, two
        while one < len(a) and a[one] not in _ALNUM:
            one += 1
        while two < len(b) and b[two] not in _ALNUM:
            two += 1

        if one >= len(a) or two >= len(b):
            break

        # A longer separator run wins outright.
        if (one - sep_one) != (two - sep_two):
            return -1 if (one - sep_one) < (two - sep_two) else 1

        charset = _DIGITS if a[one] in _DIGITS else _ALPHA
        end_one, end_two = one, two
        while end_one < len(a) and a[end_one] in charset:
            end_one += 1
        while end_two < len(b) and b[end_two] in charset:
            end_two += 1

        seg_one, seg_two = a[one:end_one], b[two:end_two]

        # Segment types differ: numbers beat letters.
        if not seg_two:
            return 1 if charset is _DIGITS else -1

        if charset is _DIGITS:
            seg_one = seg_one.lstrip("0")
            seg_two = seg_two.lstrip("0")
            if len(seg_one) != len(seg_two):
                return -1 if len(seg_one) < len(seg_two) else 1

        if seg_one != seg_two:
            return -1 if seg_one < seg_two else 1

        one, two = end_one, end_two

    if one >= len(a) and two >= len(b):
        return 0

    # A remaining alphabetic run never beats an exhausted string.
    if (one >= len(a) and b[two] not in _ALPHA) or (one < len(a) and a[one] in _ALPHA):
        return -1
    return 1


def vercmp(a: str, b: str) -> int:
    """
    Compare two full versions, returning `-1`, `0` or `1`.

    Epochs are compared first, then versions. Releases are only compared when
    both sides carry one, so `1.0` is equal to `1.0-2`.
    """
    if a == b:
        return 0

    epoch_a, version_a, release_a = _parse_evr(a)
    epoch_b, version_b, release_b = _parse_evr(b)

    result = _segment_cmp(epoch_a, epoch_b)
    if result == 0:
        result = _segment_cmp(version_a, version_b)
        if result == 0 and release_a is not None and release_b is not None:
            result = _segment_cmp(release_a, release_b)
    return _sign(result)
