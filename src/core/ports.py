"""Ports (interfaces) used by the reverse queries.

The reverse lookups only need a way to walk every stored rule and to resolve
a number forward, so any rule store offering both can be inverted.
"""

from __future__ import annotations

from typing import Iterator, Protocol

from core.models import ForwardingRule, NumberList


class RuleSource(Protocol):
    """Rule store operations required by :mod:`core.reverse`."""

    def rules(self) -> Iterator[ForwardingRule]:
        ...

    def get(self, number: str) -> NumberList:
        ...
