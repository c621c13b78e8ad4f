"""Console command processing.

The processor turns one input line into output lines. It holds no I/O so the
same logic serves the interactive prompt, scripts, and tests.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from adapters.command_parser import Command, CommandError, parse_command
from adapters.result_formatting import (
    HELP_TEXT,
    format_error,
    format_numbers,
    format_rules,
)
from core.forwarding_trie import ForwardingTrie

LOGGER = logging.getLogger(__name__)

OK = "OK"


class CommandProcessor:
    """Dispatches parsed console commands to a forwarding trie."""

    def __init__(self, trie: ForwardingTrie) -> None:
        self._trie = trie
        self.finished = False
        self._handlers: Dict[str, Callable[[Command], List[str]]] = {
            "add": self._add,
            "remove": self._remove,
            "get": self._get,
            "reverse": self._reverse,
            "consistent_reverse": self._consistent_reverse,
            "list": self._list,
            "help": self._help,
            "quit": self._quit,
        }

    def handle(self, line: str) -> List[str]:
        """Process one console line and return the lines to print."""

        try:
            command = parse_command(line)
        except CommandError as exc:
            LOGGER.debug("Rejected console line %r: %s", line, exc)
            return [format_error(str(exc))]

        if command is None:
            return []
        return self._handlers[command.action](command)

    def _add(self, command: Command) -> List[str]:
        prefix, target = command.args
        if not self._trie.add(prefix, target):
            return [format_error("rejected")]
        return [OK]

    def _remove(self, command: Command) -> List[str]:
        self._trie.remove(command.args[0])
        return [OK]

    def _get(self, command: Command) -> List[str]:
        return format_numbers(self._trie.get(command.args[0]))

    def _reverse(self, command: Command) -> List[str]:
        return format_numbers(self._trie.reverse(command.args[0]))

    def _consistent_reverse(self, command: Command) -> List[str]:
        return format_numbers(self._trie.consistent_reverse(command.args[0]))

    def _list(self, command: Command) -> List[str]:
        return format_rules(self._trie.rules())

    def _help(self, command: Command) -> List[str]:
        return HELP_TEXT.splitlines()

    def _quit(self, command: Command) -> List[str]:
        self.finished = True
        return []
