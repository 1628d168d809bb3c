"""
Jaro and Jaro-Winkler string similarity.

Matching is first-fit: each character of `a` claims the first unclaimed equal
character of `b` inside the match window, scanning left to right. This differs
from best-fit alignment on strings with repeated characters, so the scan order
matters for the output.
"""

from __future__ import annotations

PREFIX_SCALE = 0.1
MAX_PREFIX = 4


def _match_window(m: int, n: int) -> int:
    # max(m, n) // 2 - 1 is only negative when both strings have length 1;
    # floored at 0 so identical single characters still match.
    return max(max(m, n) // 2 - 1, 0)


def jaro_similarity(a: str, b: str) -> float:
    m, n = len(a), len(b)

    if m == 0 and n == 0:
        return 1.0
    if m == 0 or n == 0:
        return 0.0

    window = _match_window(m, n)
    a_matched = [False] * m
    b_matched = [False] * n
    matches = 0

    for i in range(m):
        start = max(0, i - window)
        end = min(i + window + 1, n)
        for j in range(start, end):
            if b_matched[j] or a[i] != b[j]:
                continue
            a_matched[i] = True
            b_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    # Walk matched characters of both strings in lockstep
    mismatched = 0
    k = 0
    for i in range(m):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if a[i] != b[k]:
            mismatched += 1
        k += 1

    transpositions = mismatched / 2
    return (matches / m + matches / n + (matches - transpositions) / matches) / 3


def common_prefix_length(a: str, b: str, limit: int = MAX_PREFIX) -> int:
    prefix = 0
    for ca, cb in zip(a[:limit], b[:limit]):
        if ca != cb:
            break
        prefix += 1
    return prefix


def jaro_winkler_similarity(a: str, b: str) -> float:
    """
    Jaro-Winkler similarity in [0, 1].

    Args:
        a: First string, already normalized and case-folded by the caller
        b: Second string, same treatment

    Returns:
        1.0 for identical strings, 0.0 when no characters match
    """
    jaro = jaro_similarity(a, b)
    if jaro == 0.0:
        return 0.0
    prefix = common_prefix_length(a, b)
    return jaro + prefix * PREFIX_SCALE * (1 - jaro)
