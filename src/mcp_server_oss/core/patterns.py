"""Wildcard file-name patterns ('*.png', 'icon_?.svg')."""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a wildcard pattern into an anchored, case-insensitive regex.

    ``*`` matches any run of characters (including none), ``?`` exactly one
    character; everything else is literal.
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def compile_pattern(pattern: str | None) -> Callable[[str], bool]:
    """Return a predicate matching whole names against ``pattern``.

    An empty or missing pattern matches everything.
    """
    if not pattern:
        return lambda name: True
    regex = glob_to_regex(pattern)
    return lambda name: regex.fullmatch(name) is not None


def filter_names(names: Iterable[str], pattern: str | None) -> list[str]:
    """Keep the names matching ``pattern``, in their original order."""
    matches = compile_pattern(pattern)
    return [name for name in names if matches(name)]
