"""Helpers for working with the 12-symbol phone number alphabet."""

from __future__ import annotations

from typing import Any, Tuple

ALPHABET = "0123456789*#"
BASE = len(ALPHABET)

_CODES = {symbol: code for code, symbol in enumerate(ALPHABET)}


def symbol_to_code(symbol: str) -> int:
    """Return the branch index (0-11) for a single alphabet symbol."""

    try:
        return _CODES[symbol]
    except KeyError:
        raise ValueError(f"Not a phone number symbol: {symbol!r}") from None


def code_to_symbol(code: int) -> str:
    """Inverse of :func:`symbol_to_code`."""

    if not 0 <= code < BASE:
        raise ValueError(f"Symbol code out of range: {code}")
    return ALPHABET[code]


def is_valid_number(number: Any) -> bool:
    """Return True for a non-empty string made only of alphabet symbols."""

    if not isinstance(number, str) or not number:
        return False
    return all(ch in _CODES for ch in number)


def number_sort_key(number: str) -> Tuple[int, ...]:
    """Sort key comparing numbers symbol by symbol, shorter first on ties."""

    return tuple(_CODES[ch] for ch in number)
