"""Configuration loader for quiz sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quiz_cli.core import config as core_config
from quiz_cli.core import workspace as workspace_mod

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "QUIZ_CLI_CONFIG"
ENV_PREFIX = "QUIZ_CLI_"

_TEMPLATE_PACKAGE = "quiz_cli.quiz.data"
_DEFAULT_QUESTION_COUNTS: tuple[int, ...] = (3, 5)
_DEFAULT_LOG_LEVEL = "INFO"


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for a quiz run."""

    bank_path: Optional[Path]
    question_counts: tuple[int, ...]
    show_explanations: bool
    seed: Optional[int]
    clear_screen: bool
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of env and file options."""

    bank_path: Optional[Path] = None
    seed: Optional[int] = None
    show_explanations: Optional[bool] = None
    clear_screen: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults.

    A missing default config file is fine; a missing file that was asked for
    explicitly (``--config`` or ``QUIZ_CLI_CONFIG``) is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    explicit_path = config_path or _env_path(env_map, "CONFIG")
    requested = explicit_path or layout.path_for("config") / CONFIG_FILENAME

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(requested))
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit_path is not None:
        raise QuizConfigError(f"Config file not found: {requested}")

    file_bank = _file_bank_path(table["bank"]["path"], loaded_path)
    bank_path = _pick_first(
        overrides.bank_path, _env_path(env_map, "BANK"), file_bank
    )

    config = QuizConfig(
        bank_path=Path(bank_path).expanduser() if bank_path else None,
        question_counts=_normalize_counts(table["session"]["question_counts"]),
        show_explanations=_require_bool(
            _pick_first(
                overrides.show_explanations,
                table["session"]["show_explanations"],
            ),
            field="session.show_explanations",
        ),
        seed=_resolve_seed(
            _pick_first(
                overrides.seed,
                _env_int(env_map, "SEED"),
                table["session"]["seed"],
            )
        ),
        clear_screen=_require_bool(
            _pick_first(overrides.clear_screen, table["display"]["clear_screen"]),
            field="display.clear_screen",
        ),
        log_level=_resolve_log_level(
            _pick_first(
                overrides.log_level,
                _env_string(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            )
        ),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_template() -> str:
    """Return the packaged ``quiz.toml`` template."""

    return (
        resources.files(_TEMPLATE_PACKAGE)
        .joinpath(CONFIG_FILENAME)
        .read_text(encoding="utf-8")
    )


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=read_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise QuizConfigError(str(exc)) from exc


def default_config_path(
    *, env: Optional[Mapping[str, str]] = None, workspace_path: Optional[Path] = None
) -> Path:
    try:
        layout = workspace_mod.ensure_workspace(env=env, path=workspace_path)
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc
    return layout.path_for("config") / CONFIG_FILENAME


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "bank": {"path": ""},
        "session": {
            "question_counts": list(_DEFAULT_QUESTION_COUNTS),
            "show_explanations": True,
            "seed": -1,
        },
        "display": {"clear_screen": True},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _file_bank_path(value: object, config_file: Optional[Path]) -> Optional[Path]:
    if not isinstance(value, str):
        raise QuizConfigError("bank.path must be a string.")
    raw = value.strip()
    if not raw:
        return None
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute() and config_file is not None:
        candidate = config_file.parent / candidate
    return candidate


def _normalize_counts(value: object) -> tuple[int, ...]:
    if not isinstance(value, list):
        raise QuizConfigError("session.question_counts must be a list.")
    counts: list[int] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or item <= 0:
            raise QuizConfigError(
                "session.question_counts entries must be positive integers."
            )
        if item not in counts:
            counts.append(item)
    return tuple(sorted(counts))


def _require_bool(value: object, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise QuizConfigError(f"{field} must be true or false.")
    return value


def _resolve_seed(value: object) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizConfigError("session.seed must be an integer.")
    return value if value >= 0 else None


def _resolve_log_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw).expanduser() if raw else None


def _env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise QuizConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got {raw!r}."
        ) from exc


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
