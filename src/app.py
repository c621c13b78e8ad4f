"""Application entry point for the phonefwd console."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from typing import Callable, Iterable, Optional, TextIO

from art import tprint

import settings
from adapters.result_formatting import format_rules
from console import CommandProcessor
from core.forwarding_trie import ForwardingTrie, build_trie

NAME = "PHONEFWD"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _MaskingFormatter(logging.Formatter):
    """Hide all but the last symbols of phone numbers in log messages."""

    NUMBER_RE = re.compile(r"[0-9*#]{4,}")

    def __init__(self, fmt: str, datefmt: Optional[str] = None, keep: int = 2) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._keep = keep

    def _mask(self, match: re.Match) -> str:
        number = match.group(0)
        return "x" * (len(number) - self._keep) + number[-self._keep :]

    def mask(self, text: str) -> str:
        return self.NUMBER_RE.sub(self._mask, text)

    def formatException(self, ei) -> str:
        return self.mask(super().formatException(ei))

    def formatStack(self, stack_info: str) -> str:
        return self.mask(super().formatStack(stack_info))

    def format(self, record: logging.LogRecord) -> str:
        # Masking works on a copy so other handlers still see the raw record.
        # Only message, traceback and stack are masked; timestamps stay readable.
        masked = logging.makeLogRecord(record.__dict__)
        masked.msg = self.mask(record.getMessage())
        masked.args = None
        # Traceback text cached by another handler would skip formatException.
        masked.exc_text = None
        return super().format(masked)


def _configure_logging(config: dict, level_override: Optional[str] = None) -> None:
    if not config.get("enabled", False) and not level_override:
        return

    level_name = str(level_override or config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    if config.get("redact", {}).get("enabled", False):
        formatter: logging.Formatter = _MaskingFormatter(fmt=fmt, datefmt=datefmt)
    else:
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        # stderr keeps log lines apart from command output on stdout.
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/phonefwd.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def run_console(
    processor: CommandProcessor,
    lines: Iterable[str],
    write: Callable[[str], None],
    prompt: Optional[str] = None,
) -> int:
    """Feed ``lines`` to the processor until input ends or quit is given.

    Returns the number of lines that produced an error.
    """

    errors = 0
    if prompt:
        write(prompt)
    for line in lines:
        for output in processor.handle(line):
            if output.startswith("ERROR"):
                errors += 1
            write(output + "\n")
        if processor.finished:
            break
        if prompt:
            write(prompt)
    return errors


def _run(config: settings.Settings, script: Optional[str], show_banner: bool) -> int:
    trie = build_trie(config.rules)
    LOGGER.info("Loaded %d forwarding rule(s)", len(trie))
    processor = CommandProcessor(trie)

    try:
        if script:
            with open(script, "r", encoding="utf-8") as handle:
                return run_console(processor, handle, sys.stdout.write)

        interactive = sys.stdin.isatty()
        if interactive and show_banner:
            _print_banner()
        prompt = config.console.prompt if interactive else None
        errors = run_console(processor, sys.stdin, _write_flush(sys.stdout), prompt)
        # Typos at the prompt are not a failure of the session.
        return 0 if interactive else errors
    finally:
        trie.delete()


def _write_flush(stream: TextIO) -> Callable[[str], None]:
    def write(text: str) -> None:
        stream.write(text)
        stream.flush()

    return write


def _show_rules(config: settings.Settings) -> None:
    trie: ForwardingTrie = build_trie(config.rules)
    for line in format_rules(trie.rules()):
        print(line)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="phonefwd")
    parser.add_argument("--config", help="Path to config.json")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--no-banner", action="store_true", help="Skip the start-up banner")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the console (default)")
    run_parser.add_argument("--script", help="Read commands from a file instead of stdin")
    subparsers.add_parser("rules", help="Print the rules seeded from the config")

    args = parser.parse_args(argv)
    config = settings.load_settings(args.config)
    # The flag wins over PHONEFWD_LOG_LEVEL; either one enables logging.
    _configure_logging(config.logging, args.log_level or config.log_level)

    if args.command == "rules":
        _show_rules(config)
        return 0

    show_banner = config.console.banner and not args.no_banner
    errors = _run(config, getattr(args, "script", None), show_banner)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
