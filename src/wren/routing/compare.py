"""Specificity ordering for route patterns.

Route tables are sorted once with ``compare_patterns`` so that a linear
scan at request time hits the most specific pattern first. Rules, first
decisive one wins:

1. Patterns without a catch-all (``$$name``) before patterns with one.
2. Fewer dynamic segments first: ``/posts/new`` before ``/posts/$id``.
3. Fewer segments first: ``/posts`` before ``/posts/new``.
4. Left to right, a literal segment before a dynamic one at the same
   position: ``/posts/$id`` before ``/$kind/recent``.
5. At a position where both are dynamic, more captures in the segment
   first: ``/$a-$b`` before ``/$a``.

Anything else compares equal; ``sorted`` is stable, so equally specific
patterns keep their input order.
"""

import re
from collections.abc import Iterable
from functools import cmp_to_key

from wren.routing.pattern import split_segments

_CATCH_ALL_RE = re.compile(r"\$\$\w+$")


def _is_catch_all(pattern: str) -> bool:
    return _CATCH_ALL_RE.search(pattern) is not None


def _is_dynamic(segment: str) -> bool:
    return "$" in segment


def compare_patterns(a: str, b: str) -> int:
    """Three-way compare two patterns by specificity.

    Negative when *a* should be tried before *b*, positive when after,
    zero when neither is more specific.
    """
    catch_all = int(_is_catch_all(a)) - int(_is_catch_all(b))
    if catch_all:
        return catch_all

    a_segments = split_segments(a)
    b_segments = split_segments(b)

    dynamic = sum(map(_is_dynamic, a_segments)) - sum(map(_is_dynamic, b_segments))
    if dynamic:
        return dynamic

    length = len(a_segments) - len(b_segments)
    if length:
        return length

    for a_segment, b_segment in zip(a_segments, b_segments, strict=True):
        kind = int(_is_dynamic(a_segment)) - int(_is_dynamic(b_segment))
        if kind:
            return kind

        # Richer parameterisation within one segment is tried first.
        captures = b_segment.count("$") - a_segment.count("$")
        if captures:
            return captures

    return 0


specificity_key = cmp_to_key(compare_patterns)
"""Sort key wrapping ``compare_patterns`` for ``sorted()`` and ``list.sort()``."""


def sort_patterns(patterns: Iterable[str]) -> list[str]:
    """Return *patterns* ordered most specific first."""
    return sorted(patterns, key=specificity_key)
