"""Command handlers behind ``quiz play``, ``quiz categories`` and ``quiz config``."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from quiz_cli.core.logging import close_logger, configure_logger

from .app import run_app
from .bank import load_bank
from .config import (
    ConfigOverrides,
    LoadResult,
    QuizConfigError,
    default_config_path,
    load_config,
    write_template,
)
from .models import QuestionBankError
from .ports import ConsolePort, InputProvider
from .render import Renderer

LOGGER_NAME = "quiz_cli.quiz"
EXIT_INTERRUPTED = 130


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--bank",
        type=Path,
        help="JSON question bank to load (defaults to the bundled bank).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a quiz.toml file (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root holding config and logs.",
    )


def _build_play_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz play",
        description="Play multiple-choice quiz rounds in the terminal.",
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed question shuffling for a repeatable order.",
    )
    parser.add_argument(
        "--no-explanations",
        dest="show_explanations",
        action="store_false",
        default=None,
        help="Do not show explanations after answers.",
    )
    parser.add_argument(
        "--no-clear",
        dest="clear_screen",
        action="store_false",
        default=None,
        help="Do not clear the terminal between rounds.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the log file level (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def _build_categories_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz categories",
        description="List the categories available in the question bank.",
    )
    _add_common_arguments(parser)
    return parser


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz config",
        description="Manage the quiz.toml configuration file.",
    )
    sub = parser.add_subparsers(dest="action", required=True)
    init = sub.add_parser("init", help="Write the default quiz.toml template.")
    init.add_argument(
        "--path",
        type=Path,
        help="Destination file (defaults to the workspace config directory).",
    )
    init.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used to resolve the default destination.",
    )
    init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )
    return parser


def _load(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    overrides: ConfigOverrides,
) -> LoadResult:
    try:
        return load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))


def _report_bank_error(err_console: Console, exc: QuestionBankError) -> None:
    """Print a bank failure with its cause; call from inside the handler."""

    err_console.print(Text(f"Error: {exc}", style="bold red"))
    if exc.__cause__ is not None:
        err_console.print(Text(f"Caused by: {exc.__cause__}", style="dim"))
    err_console.print("Stack trace:", style="dim")
    err_console.print_exception()


def play_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    """Run the interactive game until the player declines a replay."""

    parser = _build_play_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    overrides = ConfigOverrides(
        bank_path=args.bank,
        seed=args.seed,
        show_explanations=args.show_explanations,
        clear_screen=args.clear_screen,
        log_level=args.log_level,
    )
    loaded = _load(parser, args, overrides)
    config = loaded.config

    console = console or Console()
    err_console = err_console or Console(stderr=True)
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=loaded.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug(
        "quiz play invoked",
        extra={
            "config_path": loaded.config_path,
            "bank_path": config.bank_path,
            "log_path": log_path,
        },
    )

    renderer = Renderer(
        console,
        clear_screen=config.clear_screen,
        show_explanations=config.show_explanations,
    )
    try:
        try:
            bank = load_bank(config.bank_path)
        except QuestionBankError as exc:
            logger.error("question bank failed to load", exc_info=True)
            _report_bank_error(err_console, exc)
            return 1
        logger.info(
            "question bank loaded",
            extra={"source": bank.source, "categories": len(bank)},
        )

        rng = random.Random(config.seed) if config.seed is not None else None
        port = ConsolePort(console, input_provider)
        try:
            return run_app(
                bank,
                port,
                renderer,
                question_counts=config.question_counts,
                rng=rng,
                logger=logger,
            )
        except (EOFError, KeyboardInterrupt):
            logger.info("session interrupted by user")
            renderer.interrupted()
            return EXIT_INTERRUPTED
        except Exception as exc:
            logger.exception("unhandled error during play")
            err_console.print(Text(f"\nError: {exc}", style="bold red"))
            err_console.print("Stack trace:", style="dim")
            err_console.print_exception()
            return 1
    finally:
        close_logger(logger)


def categories_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
) -> int:
    parser = _build_categories_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    loaded = _load(parser, args, ConfigOverrides(bank_path=args.bank))
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    try:
        bank = load_bank(loaded.config.bank_path)
    except QuestionBankError as exc:
        _report_bank_error(err_console, exc)
        return 1

    table = Table(title=f"Categories ({bank.source})", box=box.SIMPLE)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Questions", justify="right")
    for category in bank:
        table.add_row(category.id, category.name, str(len(category.questions)))
    console.print(table)
    return 0


def config_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        if args.path is not None:
            target = args.path.expanduser().absolute()
        else:
            target = default_config_path(workspace_path=args.workspace)
        written = write_template(target, overwrite=args.force)
    except QuizConfigError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0
