"""Console-to-core command parsing adapter.

This keeps the line syntax of the console out of the core trie.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

COMMENT_PREFIX = ";"

# keyword -> (action, number of arguments)
KEYWORDS = {
    "add": ("add", 2),
    "del": ("remove", 1),
    "remove": ("remove", 1),
    "get": ("get", 1),
    "rev": ("reverse", 1),
    "grev": ("consistent_reverse", 1),
    "list": ("list", 0),
    "help": ("help", 0),
    "quit": ("quit", 0),
    "exit": ("quit", 0),
}

OPERATORS = (">", "?")

_TOKEN_RE = re.compile(r"[>?]|[^\s>?]+")


class CommandError(ValueError):
    """Raised for console lines that do not form a command."""


@dataclass(frozen=True)
class Command:
    """A parsed console command; numbers are passed through unvalidated."""

    action: str
    args: Tuple[str, ...] = ()


def tokenize(line: str) -> List[str]:
    """Split a line into words, treating ``>`` and ``?`` as separate tokens."""

    return _TOKEN_RE.findall(line)


def _are_operands(*tokens: str) -> bool:
    return not any(token in OPERATORS for token in tokens)


def parse_command(line: str) -> Optional[Command]:
    """Parse one console line; returns None for blank lines and comments.

    Besides keyword commands, three operator forms are understood:
    ``A > B`` adds a rule, ``A ?`` resolves A and ``? A`` reverses A.
    """

    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None

    tokens = tokenize(stripped)
    if len(tokens) == 3 and tokens[1] == ">" and _are_operands(tokens[0], tokens[2]):
        return Command("add", (tokens[0], tokens[2]))
    if len(tokens) == 2 and tokens[1] == "?" and _are_operands(tokens[0]):
        return Command("get", (tokens[0],))
    if len(tokens) == 2 and tokens[0] == "?" and _are_operands(tokens[1]):
        return Command("reverse", (tokens[1],))
    if not _are_operands(*tokens):
        raise CommandError(f"malformed operator expression: {stripped}")

    keyword, args = tokens[0].lower(), tuple(tokens[1:])
    if keyword not in KEYWORDS:
        raise CommandError(f"unknown command: {tokens[0]}")

    action, arity = KEYWORDS[keyword]
    if len(args) != arity:
        raise CommandError(f"{keyword} expects {arity} argument(s), got {len(args)}")
    return Command(action, args)
