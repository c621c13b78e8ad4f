"""Reverse lookups: which numbers forward to a given number (core domain)."""

from __future__ import annotations

import logging
from typing import List

from core.models import NumberList
from core.ports import RuleSource
from core.symbols import is_valid_number, number_sort_key

LOGGER = logging.getLogger(__name__)


def reverse(source: RuleSource, number: str) -> NumberList:
    """Return all numbers some stored rule could rewrite into ``number``.

    Matching logic:
    - A rule whose target is a prefix of ``number`` yields its own prefix
      followed by what remains of ``number`` after the target.
    - ``number`` itself is always included.
    - The result is sorted by symbol code (shorter first on ties) and holds
      no duplicates.

    Candidates are not checked against longer rules on their own path, so
    some may resolve elsewhere; see :func:`consistent_reverse`.
    """

    if not is_valid_number(number):
        return NumberList.degenerate()

    candidates: List[str] = [number]
    for rule in source.rules():
        if number.startswith(rule.target):
            candidates.append(rule.prefix + number[len(rule.target) :])

    candidates.sort(key=number_sort_key)
    result = NumberList()
    previous = None
    for candidate in candidates:
        if candidate != previous:
            result.append(candidate)
        previous = candidate
    return result


def consistent_reverse(source: RuleSource, number: str) -> NumberList:
    """Return the reverse candidates that resolve forward to exactly ``number``."""

    if not is_valid_number(number):
        return NumberList.degenerate()

    candidates = reverse(source, number)
    result = NumberList()
    for candidate in candidates:
        if source.get(candidate) == [number]:
            result.append(candidate)
    LOGGER.debug(
        "Reverse of %s: %d candidate(s), %d consistent", number, len(candidates), len(result)
    )
    return result
