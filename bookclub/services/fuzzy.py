"""Approximate matching of free-text labels such as theme names.

Two labels match when, after normalization, they are equal, one contains the
other and the lengths differ by at most ``MAX_AFFIX_LENGTH`` characters (plural
forms like "Mystery" / "Mysteries"), or their Levenshtein distance is at most
``MAX_EDIT_DISTANCE``.
"""

import re

MAX_EDIT_DISTANCE = 3
MAX_AFFIX_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")


def normalize_label(value):
    return _WHITESPACE.sub(" ", value.lower().strip())


def levenshtein_distance(first, second):
    """Minimum number of single-character insertions, deletions and
    substitutions turning ``first`` into ``second``."""
    if len(first) < len(second):
        first, second = second, first

    previous = list(range(len(second) + 1))
    for i, char_a in enumerate(first, start=1):
        current = [i]
        for j, char_b in enumerate(second, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    1 + min(previous[j], current[j - 1], previous[j - 1])
                )
        previous = current

    return previous[-1]


def is_fuzzy_match(first, second):
    normalized_a = normalize_label(first)
    normalized_b = normalize_label(second)

    if normalized_a == normalized_b:
        return True

    if normalized_a in normalized_b or normalized_b in normalized_a:
        if abs(len(normalized_a) - len(normalized_b)) <= MAX_AFFIX_LENGTH:
            return True

    return levenshtein_distance(normalized_a, normalized_b) <= MAX_EDIT_DISTANCE


def _label_of(candidate):
    return candidate if isinstance(candidate, str) else candidate.name


def find_fuzzy_match(name, existing):
    """Return the first entry of ``existing`` that fuzzy-matches ``name``.

    Entries are plain strings or objects with a ``name`` attribute; the first
    match in the order supplied wins, not the closest one.
    """
    for candidate in existing:
        if is_fuzzy_match(name, _label_of(candidate)):
            return candidate
    return None
