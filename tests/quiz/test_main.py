from __future__ import annotations

import pytest
from rich.console import Console

from fixtures import ScriptedInput, question_dict
from quiz_cli.quiz import _main


def make_consoles():
    return Console(record=True, width=200), Console(record=True, width=200)


@pytest.fixture
def demo_bank(bank_builder):
    return bank_builder.write(
        {
            "demo": (
                "Demo",
                [
                    question_dict("First?", ["right", "wrong"], 0, "First reason."),
                    question_dict("Second?", ["right", "wrong"], 0),
                ],
            )
        }
    )


def test_play_full_round(demo_bank, tmp_path):
    console, err_console = make_consoles()
    provider = ScriptedInput(["1", "1", "", "1", "", "1", "n"])
    ws = tmp_path / "ws"

    code = _main.play_main(
        ["--bank", str(demo_bank), "--workspace", str(ws), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=provider,
    )

    assert code == 0
    assert provider.remaining == 0
    output = console.export_text()
    assert "Demo" in output
    assert "2/2 (100%)" in output
    assert "Perfect score! Amazing!" in output
    assert "First reason." in output
    assert "Thanks for playing!" in output
    assert err_console.export_text() == ""

    log_file = ws / "logs" / "quiz.log"
    assert log_file.exists()
    assert "session finished" in log_file.read_text(encoding="utf-8")


def test_play_hides_explanations_on_request(demo_bank, tmp_path):
    console, err_console = make_consoles()
    provider = ScriptedInput(["1", "1", "", "1", "", "1", "n"])

    code = _main.play_main(
        [
            "--bank",
            str(demo_bank),
            "--workspace",
            str(tmp_path / "ws"),
            "--no-clear",
            "--no-explanations",
            "--seed",
            "4",
        ],
        console=console,
        err_console=err_console,
        input_provider=provider,
    )

    assert code == 0
    assert "First reason." not in console.export_text()


def test_play_reports_missing_bank(tmp_path):
    console, err_console = make_consoles()

    code = _main.play_main(
        ["--bank", str(tmp_path / "nope.json"), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput([]),
    )

    assert code == 1
    assert "Question bank not found" in err_console.export_text()


def test_play_reports_invalid_bank(bank_builder):
    console, err_console = make_consoles()
    path = bank_builder.write_raw("{broken")

    code = _main.play_main(
        ["--bank", str(path), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput([]),
    )

    errors = err_console.export_text()
    assert code == 1
    assert "not valid JSON" in errors
    assert "Caused by:" in errors
    assert "Stack trace:" in errors
    assert "JSONDecodeError" in errors


def test_play_end_of_input_is_an_interrupt(demo_bank):
    console, err_console = make_consoles()

    code = _main.play_main(
        ["--bank", str(demo_bank), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput(["1"]),
    )

    assert code == _main.EXIT_INTERRUPTED
    assert "Session interrupted." in console.export_text()


def test_play_unexpected_error_shows_trace(demo_bank, monkeypatch):
    console, err_console = make_consoles()

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(_main, "run_app", explode)

    code = _main.play_main(
        ["--bank", str(demo_bank), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput([]),
    )

    errors = err_console.export_text()
    assert code == 1
    assert "Error: boom" in errors
    assert "Stack trace:" in errors


def test_play_rejects_bad_config(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        _main.play_main(["--config", str(tmp_path / "missing.toml")])

    assert excinfo.value.code == 2


def test_play_uses_env_bank(demo_bank, monkeypatch):
    monkeypatch.setenv("QUIZ_CLI_BANK", str(demo_bank))
    console, err_console = make_consoles()

    code = _main.play_main(
        ["--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput(["1", "1", "", "2", "", "2", "n"]),
    )

    assert code == 0
    output = console.export_text()
    assert "0/2 (0%)" in output
    assert "Keep practicing! You'll get better!" in output
    assert "Review these questions:" in output


def test_categories_lists_bank(demo_bank):
    console = Console(record=True, width=200)

    code = _main.categories_main(["--bank", str(demo_bank)], console=console)

    output = console.export_text()
    assert code == 0
    assert "demo" in output
    assert "Demo" in output
    assert "2" in output


def test_categories_default_bank():
    console = Console(record=True, width=200)

    assert _main.categories_main([], console=console) == 0
    assert "python" in console.export_text()


def test_categories_missing_bank_matches_play_output(tmp_path):
    bank = str(tmp_path / "none.json")
    console, listing_errors = make_consoles()
    _, play_errors = make_consoles()

    code = _main.categories_main(
        ["--bank", bank], console=console, err_console=listing_errors
    )
    _main.play_main(
        ["--bank", bank, "--no-clear"],
        console=console,
        err_console=play_errors,
        input_provider=ScriptedInput([]),
    )

    assert code == 1
    errors = listing_errors.export_text()
    assert "Error: Question bank not found" in errors
    assert "Caused by:" in errors
    assert "Stack trace:" in errors
    assert "Error: Question bank not found" in play_errors.export_text()
    assert console.export_text() == ""


def test_play_non_utf8_bank_is_reported(bank_builder):
    console, err_console = make_consoles()
    bank_builder.root.mkdir(parents=True, exist_ok=True)
    path = bank_builder.root / "latin1.json"
    path.write_bytes(b'{"categories": {"a": {"name": "\xff", "questions": []}}}')

    code = _main.play_main(
        ["--bank", str(path), "--no-clear"],
        console=console,
        err_console=err_console,
        input_provider=ScriptedInput([]),
    )

    assert code == 1
    assert "not valid UTF-8" in err_console.export_text()


def test_config_init_writes_template(tmp_path, capsys):
    target = tmp_path / "conf" / "quiz.toml"

    assert _main.config_main(["init", "--path", str(target)]) == 0
    assert target.exists()
    assert "Wrote quiz config to" in capsys.readouterr().out

    assert _main.config_main(["init", "--path", str(target)]) == 1
    assert "already exists" in capsys.readouterr().err

    assert _main.config_main(["init", "--path", str(target), "--force"]) == 0


def test_config_init_defaults_to_workspace(tmp_path, capsys):
    ws = tmp_path / "ws"

    assert _main.config_main(["init", "--workspace", str(ws)]) == 0
    assert (ws / "config" / "quiz.toml").exists()


def test_config_requires_action():
    with pytest.raises(SystemExit) as excinfo:
        _main.config_main([])

    assert excinfo.value.code == 2
