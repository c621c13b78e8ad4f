"""Prefix trie storing phone number forwarding rules (core domain)."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from core.models import ForwardingRule, NumberList
from core.reverse import consistent_reverse, reverse
from core.symbols import BASE, code_to_symbol, is_valid_number, symbol_to_code

LOGGER = logging.getLogger(__name__)


class _Node:
    """One prefix position; owns its children outright."""

    __slots__ = ("target", "children")

    def __init__(self) -> None:
        self.target: Optional[str] = None
        self.children: List[Optional[_Node]] = [None] * BASE


class ForwardingTrie:
    """Forwarding rules keyed by number prefix.

    A rule ``prefix -> target`` rewrites any number starting with ``prefix`` by
    replacing that prefix with ``target``. When several rules match, the one
    with the longest prefix wins.

    Not thread-safe: callers sharing a trie must serialize access themselves.
    """

    def __init__(self) -> None:
        self._root = _Node()

    def delete(self) -> None:
        """Drop every node and rule held by the trie."""

        self._root = _Node()

    def add(self, prefix: str, target: str) -> bool:
        """Register ``prefix -> target``, replacing any rule at that exact prefix.

        Returns False, leaving the trie untouched, when either number is invalid,
        when both are equal, or when memory runs out while growing the path.
        """

        if not is_valid_number(prefix) or not is_valid_number(target):
            return False
        if prefix == target:
            return False

        node = self._root
        # First edge created by this call; cutting it undoes the whole new path.
        grown_from: Optional[Tuple[_Node, int]] = None
        try:
            for symbol in prefix:
                code = symbol_to_code(symbol)
                child = node.children[code]
                if child is None:
                    child = _Node()
                    node.children[code] = child
                    if grown_from is None:
                        grown_from = (node, code)
                node = child
        except MemoryError:
            if grown_from is not None:
                parent, code = grown_from
                parent.children[code] = None
            LOGGER.warning("Out of memory while adding rule for %s; rolled back", prefix)
            return False

        node.target = target
        LOGGER.debug("Rule added: %s -> %s", prefix, target)
        return True

    def remove(self, number: str) -> None:
        """Delete the rule at ``number`` and every rule below it."""

        if not is_valid_number(number):
            return

        parent: Optional[_Node] = self._root
        for symbol in number[:-1]:
            parent = parent.children[symbol_to_code(symbol)]
            if parent is None:
                return

        code = symbol_to_code(number[-1])
        if parent.children[code] is not None:
            parent.children[code] = None
            LOGGER.debug("Rules removed under %s", number)

    def get(self, number: str) -> NumberList:
        """Resolve ``number`` through its longest matching rule.

        The result always holds one element: the rewritten number, the number
        itself when no rule matches, or the absent marker for invalid input.
        """

        if not is_valid_number(number):
            return NumberList.degenerate()

        target: Optional[str] = None
        matched_len = 0
        node: Optional[_Node] = self._root
        for depth, symbol in enumerate(number):
            node = node.children[symbol_to_code(symbol)]
            if node is None:
                break
            if node.target is not None:
                target = node.target
                matched_len = depth + 1

        result = NumberList()
        if target is None:
            result.append(number)
        else:
            result.append(target + number[matched_len:])
        return result

    def reverse(self, number: str) -> NumberList:
        """Every number some rule could turn into ``number`` (a superset)."""

        return reverse(self, number)

    def consistent_reverse(self, number: str) -> NumberList:
        """Numbers that :meth:`get` actually resolves to ``number``."""

        return consistent_reverse(self, number)

    def rules(self) -> Iterator[ForwardingRule]:
        """Yield stored rules depth-first, children in symbol-code order."""

        stack: List[Tuple[_Node, str]] = [(self._root, "")]
        while stack:
            node, prefix = stack.pop()
            if node.target is not None:
                yield ForwardingRule(prefix=prefix, target=node.target)
            # Pushed highest code first so the lowest code is visited next.
            for code in range(BASE - 1, -1, -1):
                child = node.children[code]
                if child is not None:
                    stack.append((child, prefix + code_to_symbol(code)))

    def __len__(self) -> int:
        return sum(1 for _ in self.rules())

    def __contains__(self, prefix: object) -> bool:
        if not is_valid_number(prefix):
            return False
        node: Optional[_Node] = self._root
        for symbol in prefix:
            node = node.children[symbol_to_code(symbol)]
            if node is None:
                return False
        return node.target is not None


def build_trie(rules_config: Iterable[dict]) -> ForwardingTrie:
    """Build a trie from rule configs.

    Disabled entries are skipped; entries the trie rejects are logged and
    skipped so one bad line in a config does not block start-up.
    """

    trie = ForwardingTrie()
    for rule in rules_config:
        if not rule.get("enabled", True):
            continue
        prefix = rule.get("prefix")
        target = rule.get("target")
        if not trie.add(prefix, target):
            LOGGER.warning("Skipping rejected rule: %r -> %r", prefix, target)
    return trie
