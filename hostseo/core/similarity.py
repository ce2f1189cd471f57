"""Character-run string similarity.

Implements the classic "similar text" measure: find the longest common
substring of the two strings, then repeat the search on the pieces to the
left and to the right of that match, summing every matched length. The
percentage is ``2 * matched / (len(a) + len(b)) * 100``.

Duplicate thresholds assume this exact measure; ratio- or token-based
metrics give different percentages for the same pair.

Each longest-common-substring search is O(n * m) time in the worst case and
only visits position pairs whose characters match, which is fast enough
for titles and 500 character body snippets.
"""

from collections import defaultdict
from typing import Dict, List, Tuple


def _longest_common_substring(a: str, b: str) -> Tuple[int, int, int]:
    """Return ``(pos_a, pos_b, length)`` of the longest common substring.

    Ties resolve to the smallest ``pos_a``, then the smallest ``pos_b``,
    i.e. the first run found scanning ``a`` left to right and, for each
    position, ``b`` left to right.
    """
    positions: Dict[str, List[int]] = defaultdict(list)
    for q, char in enumerate(b):
        positions[char].append(q)

    best_len, best_a, best_b = 0, len(a), len(b)
    # following[q] is the common prefix length of a[p + 1:] and b[q:]
    following: Dict[int, int] = {}
    for p in range(len(a) - 1, -1, -1):
        current = {}
        for q in positions.get(a[p], ()):
            length = following.get(q + 1, 0) + 1
            current[q] = length
            if length > best_len or (length == best_len and p < best_a):
                best_len, best_a, best_b = length, p, q
        following = current

    if not best_len:
        return 0, 0, 0
    return best_a, best_b, best_len


def similar_text(a: str, b: str) -> int:
    """Count the characters matched between ``a`` and ``b``."""
    total = 0
    pending: List[Tuple[str, str]] = [(a, b)]
    while pending:
        left, right = pending.pop()
        if not left or not right:
            continue
        pos_a, pos_b, length = _longest_common_substring(left, right)
        if not length:
            continue
        total += length
        if pos_a and pos_b:
            pending.append((left[:pos_a], right[:pos_b]))
        if pos_a + length < len(left) and pos_b + length < len(right):
            pending.append((left[pos_a + length :], right[pos_b + length :]))
    return total


def similarity_percent(a: str, b: str) -> float:
    """Similarity of two strings as a percentage in ``[0, 100]``.

    Two empty strings score 0, matching the reference measure.
    """
    combined = len(a) + len(b)
    if not combined:
        return 0.0
    return similar_text(a, b) * 2 * 100.0 / combined
