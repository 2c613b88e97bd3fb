from __future__ import annotations

from pathlib import Path

import pytest

from quiz_cli.core import config as core_config
from quiz_cli.quiz import config as quiz_config
from quiz_cli.quiz.config import ConfigOverrides, QuizConfigError, load_config


def test_defaults_without_config_file(tmp_path):
    result = load_config(workspace_path=tmp_path / "ws", env={})

    cfg = result.config
    assert result.config_path is None
    assert cfg.bank_path is None
    assert cfg.question_counts == (3, 5)
    assert cfg.show_explanations is True
    assert cfg.seed is None
    assert cfg.clear_screen is True
    assert cfg.log_level == "INFO"
    assert result.layout.path_for("logs").is_dir()


def test_workspace_config_file_is_picked_up(tmp_path):
    ws = tmp_path / "ws"
    target = ws / "config" / quiz_config.CONFIG_FILENAME
    target.parent.mkdir(parents=True)
    target.write_text(
        "[bank]\n"
        'path = "banks/mine.json"\n'
        "[session]\n"
        "question_counts = [10, 2, 2]\n"
        "show_explanations = false\n"
        "seed = 7\n"
        "[display]\n"
        "clear_screen = false\n"
        "[logging]\n"
        'level = "debug"\n',
        encoding="utf-8",
    )

    result = load_config(workspace_path=ws, env={})

    cfg = result.config
    assert result.config_path == target
    assert cfg.bank_path == target.parent / "banks" / "mine.json"
    assert cfg.question_counts == (2, 10)
    assert cfg.show_explanations is False
    assert cfg.seed == 7
    assert cfg.clear_screen is False
    assert cfg.log_level == "DEBUG"


def test_precedence_cli_over_env_over_file(workspace, tmp_path):
    path = workspace.write(
        "quiz.toml", '[bank]\npath = "/from/file.json"\n[session]\nseed = 1\n'
    )
    env = {
        "QUIZ_CLI_BANK": "/from/env.json",
        "QUIZ_CLI_SEED": "2",
        "QUIZ_CLI_LOG_LEVEL": "warning",
    }

    from_env = load_config(
        config_path=path, env=env, workspace_path=tmp_path / "ws"
    ).config
    assert from_env.bank_path == Path("/from/env.json")
    assert from_env.seed == 2
    assert from_env.log_level == "WARNING"

    from_cli = load_config(
        config_path=path,
        env=env,
        workspace_path=tmp_path / "ws",
        overrides=ConfigOverrides(
            bank_path=Path("/from/cli.json"),
            seed=3,
            show_explanations=False,
            clear_screen=False,
            log_level="error",
        ),
    ).config
    assert from_cli.bank_path == Path("/from/cli.json")
    assert from_cli.seed == 3
    assert from_cli.show_explanations is False
    assert from_cli.clear_screen is False
    assert from_cli.log_level == "ERROR"


def test_config_env_variable_points_at_file(workspace, tmp_path):
    path = workspace.write("elsewhere.toml", "[session]\nseed = 11\n")

    result = load_config(
        env={"QUIZ_CLI_CONFIG": str(path)}, workspace_path=tmp_path / "ws"
    )

    assert result.config_path == path
    assert result.config.seed == 11


def test_explicit_missing_config_is_an_error(tmp_path):
    with pytest.raises(QuizConfigError, match="not found"):
        load_config(
            config_path=tmp_path / "missing.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[session]\nrounds = 3\n", "Unknown configuration key 'session.rounds'"),
        ("[session]\nquestion_counts = [0]\n", "positive integers"),
        ("[session]\nquestion_counts = 3\n", "must be a list"),
        ("[session]\nshow_explanations = 'yes'\n", "true or false"),
        ("[session]\nseed = 'abc'\n", "session.seed"),
        ("[bank]\npath = 4\n", "bank.path"),
        ("[logging]\nlevel = ''\n", "logging.level"),
        ("[bank\n", "Failed to parse"),
    ],
)
def test_invalid_config_values(workspace, tmp_path, body, message):
    path = workspace.write("quiz.toml", body)

    with pytest.raises(QuizConfigError, match=message):
        load_config(config_path=path, env={}, workspace_path=tmp_path / "ws")


def test_invalid_env_seed(tmp_path):
    with pytest.raises(QuizConfigError, match="QUIZ_CLI_SEED"):
        load_config(env={"QUIZ_CLI_SEED": "soon"}, workspace_path=tmp_path / "ws")


def test_negative_seed_means_unseeded(tmp_path):
    result = load_config(
        env={}, workspace_path=tmp_path / "ws", overrides=ConfigOverrides(seed=-5)
    )

    assert result.config.seed is None


def test_template_round_trips_through_loader(tmp_path):
    target = quiz_config.write_template(tmp_path / "quiz.toml")

    parsed = core_config.load_toml(target)
    assert parsed["session"]["question_counts"] == [3, 5]
    result = load_config(config_path=target, env={}, workspace_path=tmp_path / "ws")
    assert result.config.bank_path is None
    assert result.config.seed is None

    with pytest.raises(QuizConfigError, match="already exists"):
        quiz_config.write_template(target)
    quiz_config.write_template(target, overwrite=True)


def test_default_config_path(tmp_path):
    path = quiz_config.default_config_path(workspace_path=tmp_path / "ws")

    assert path == (tmp_path / "ws").absolute() / "config" / "quiz.toml"
