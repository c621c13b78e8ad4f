"""Shared console output formatting helpers."""

from __future__ import annotations

from typing import Iterable, List

from core.models import ForwardingRule, NumberList

INVALID_NUMBER = "ERROR: invalid number"
NO_NUMBERS = "(none)"

HELP_TEXT = """\
Commands:
  add PREFIX TARGET   forward numbers starting with PREFIX to TARGET
  PREFIX > TARGET     same as add
  del NUMBER          remove the rule at NUMBER and every rule below it
  get NUMBER          resolve NUMBER (also: NUMBER ?)
  rev NUMBER          numbers that may forward to NUMBER (also: ? NUMBER)
  grev NUMBER         numbers that do forward to NUMBER
  list                show all rules
  help                show this text
  quit                leave the console"""


def format_error(reason: str) -> str:
    return f"ERROR: {reason}"


def format_numbers(numbers: NumberList) -> List[str]:
    """Return one output line per number; a degenerate result becomes an error."""

    if numbers.is_degenerate:
        return [INVALID_NUMBER]
    lines = [number for number in numbers if number is not None]
    if not lines:
        return [NO_NUMBERS]
    return lines


def format_rule(rule: ForwardingRule) -> str:
    return f"{rule.prefix} > {rule.target}"


def format_rules(rules: Iterable[ForwardingRule]) -> List[str]:
    lines = [format_rule(rule) for rule in rules]
    if not lines:
        return ["(no rules)"]
    return lines
