"""Core domain models.

These types are shared across the core and adapters to avoid tight coupling
to any console-specific representation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

# Placeholder element of a degenerate result (query made with an invalid number).
ABSENT = None


@dataclass(frozen=True)
class ForwardingRule:
    """A single prefix rule stored in the trie."""

    prefix: str
    target: str


class NumberList:
    """Ordered result of a forward or reverse query.

    Producers build the list with :meth:`append` and hand it over; callers only
    read it. A degenerate list holds exactly one :data:`ABSENT` element.
    """

    __slots__ = ("_numbers",)

    def __init__(self, numbers: Iterable[Optional[str]] = ()) -> None:
        self._numbers: List[Optional[str]] = list(numbers)

    @classmethod
    def degenerate(cls) -> "NumberList":
        return cls([ABSENT])

    @property
    def is_degenerate(self) -> bool:
        return len(self._numbers) == 1 and self._numbers[0] is ABSENT

    def append(self, number: str) -> None:
        self._numbers.append(number)

    def get(self, index: int) -> Optional[str]:
        """Return the number at ``index`` or None when out of range."""

        if index < 0 or index >= len(self._numbers):
            return None
        return self._numbers[index]

    def __len__(self) -> int:
        return len(self._numbers)

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter(self._numbers)

    def __getitem__(self, index: int) -> Optional[str]:
        return self._numbers[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NumberList):
            return self._numbers == other._numbers
        if isinstance(other, list):
            return self._numbers == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"NumberList({self._numbers!r})"
