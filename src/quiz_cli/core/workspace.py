"""Per-user workspace holding quiz-cli configuration and logs."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

WORKSPACE_ENV = "QUIZ_CLI_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quiz-cli-data"

_SUBDIRS = {
    "config": "config",
    "logs": "logs",
}


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace root and its named subdirectories."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise WorkspaceError(f"Unknown workspace directory '{key}'.") from exc


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> WorkspaceLayout:
    """Create (if needed) and return the workspace layout.

    The root comes from ``path``, then ``QUIZ_CLI_DATA_HOME``, then
    ``~/.quiz-cli-data``. Only the implicit default falls back to a temp
    directory when it is not writable; explicit locations fail instead.
    """

    env_map = os.environ if env is None else env
    base, explicit = _resolve_base(env_map, override=path)

    candidates = [base]
    if not explicit:
        candidates.append(_fallback_base())

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            return _materialize(candidate)
        except PermissionError as exc:
            last_error = exc
    raise WorkspaceError(f"Unable to prepare workspace at {base}") from last_error


def _resolve_base(
    env: Mapping[str, str], *, override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _fallback_base() -> Path:
    return Path(tempfile.gettempdir()) / "quiz-cli-data"


def _materialize(base: Path) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )
    directories = {}
    for key, relative in _SUBDIRS.items():
        target = base / relative
        if target.exists() and not target.is_dir():
            raise WorkspaceError(
                f"Expected workspace directory for '{key}' but found a file: "
                f"{target}"
            )
        target.mkdir(parents=True, exist_ok=True)
        directories[key] = target
    return WorkspaceLayout(home=base, directories=MappingProxyType(directories))
