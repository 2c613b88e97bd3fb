"""Unified CLI entry point for the ``quiz`` command."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence

CommandHandler = Callable[[Sequence[str]], int]

DEFAULT_COMMAND = "play"


@dataclass(frozen=True)
class CommandSpec:
    """Represents a quiz subcommand."""

    name: str
    summary: str
    handler: CommandHandler
    is_tui: bool = False


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="play",
        summary="Play quiz rounds interactively (default command).",
        is_tui=True,
        handler=lambda argv: _run_module_command(
            "quiz_cli.quiz._main", "play_main", argv
        ),
    ),
    CommandSpec(
        name="categories",
        summary="List the categories in the question bank.",
        handler=lambda argv: _run_module_command(
            "quiz_cli.quiz._main", "categories_main", argv
        ),
    ),
    CommandSpec(
        name="config",
        summary="Write the default quiz.toml configuration.",
        handler=lambda argv: _run_module_command(
            "quiz_cli.quiz._main", "config_main", argv
        ),
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {spec.name: spec for spec in _COMMAND_SPECS}


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (interactive)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: quiz [command] [args...]",
            "Run `quiz` with no arguments to start playing.",
            "Run `quiz list` for commands or `quiz help <name>` for details.",
            "",
            format_command_table(),
        ]
    )


def _print(text: str, *, stream: Optional[Callable[[str], object]] = None) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version("quiz-cli")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if spec is None:
        return _unknown_command(argv[0])
    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `quiz {spec.name} --help` for command options.")
    return 0


def _unknown_command(name: str) -> int:
    _print(f"Unknown command '{name}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        return COMMANDS[DEFAULT_COMMAND].handler([])

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec is not None:
        return spec.handler(tail)
    if head.startswith("-"):
        # Bare options such as ``quiz --seed 3`` belong to the default command.
        return COMMANDS[DEFAULT_COMMAND].handler(args)
    return _unknown_command(head)


def _run_module_command(
    module_name: str, func_name: str, argv: Sequence[str]
) -> int:
    target = getattr(import_module(module_name), func_name)
    try:
        result = target(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
