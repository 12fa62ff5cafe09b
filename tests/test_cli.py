import pytest

from pomodoro import cli, config, scheduler


@pytest.fixture
def no_config_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
    return tmp_path


def resolved(**overrides):
    return (config.PartialConfig(**overrides) | config.defaults()).resolve()


def test_parse_args_reads_do_subcommand():
    args = cli.parse_args(["do", "write report", "-p", "50", "--short", "10", "-r", "2"])
    assert args.command == "do"
    assert args.task == "write report"
    assert cli.cli_config(args) == config.PartialConfig(
        duration_pomodoro=50,
        duration_short_break=10,
        repetition=2,
    )


def test_parse_args_requires_task():
    with pytest.raises(SystemExit):
        cli.parse_args(["do"])


def test_cli_flags_override_file_and_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("duration_pomodoro = 40\nduration_long_break = 20\n", encoding="utf-8")
    args = cli.parse_args(["do", "task", "-p", "30", "--config", str(path)])
    assert cli.resolve_config(args) == config.ResolvedConfig(30, 5, 20, 4)


def test_cli_rejects_non_positive_flags(no_config_file):
    args = cli.parse_args(["do", "task", "-l", "0"])
    with pytest.raises(config.ConfigNonPositiveError):
        cli.resolve_config(args)


def test_run_session_stops_at_first_declined_prompt():
    prompts, ran, notified = [], [], []
    answers = iter([True, True, True, False])

    def confirm(prompt):
        prompts.append(prompt)
        return next(answers)

    completed = cli.run_session(
        scheduler.EventSequencer(resolved()),
        confirm=confirm,
        run=ran.append,
        notify=notified.append,
    )

    assert completed == 3
    assert prompts == [
        "Ready to start a pomodoro?",
        "Start a short break?",
        "Ready to start a pomodoro?",
        "Start a short break?",
    ]
    assert ran == notified == scheduler.preview(resolved(), 3)


def test_run_session_declined_immediately_runs_nothing():
    ran = []
    completed = cli.run_session(
        scheduler.EventSequencer(resolved()),
        confirm=lambda prompt: False,
        run=ran.append,
        notify=lambda interval: None,
    )
    assert completed == 0
    assert ran == []


def test_run_session_interrupt_does_not_count_current_interval(capsys):
    def run(interval):
        if interval.kind is scheduler.IntervalKind.SHORT_BREAK:
            raise KeyboardInterrupt

    completed = cli.run_session(
        scheduler.EventSequencer(resolved()),
        confirm=lambda prompt: True,
        run=run,
        notify=lambda interval: None,
    )
    assert completed == 1
    assert "Session interrupted" in capsys.readouterr().out


@pytest.mark.parametrize(
    "answer, expected",
    [("", True), ("y", True), ("YES", True), ("n", False), ("no", False), ("later", False)],
)
def test_confirm_reads_answer(monkeypatch, answer, expected):
    monkeypatch.setattr("builtins.input", lambda prompt: answer)
    assert cli.confirm("Start a short break?") is expected


def test_confirm_treats_eof_as_no(monkeypatch):
    def raise_eof(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)
    assert cli.confirm("Ready to start a pomodoro?") is False


def test_format_time():
    assert cli.format_time(0) == "00:00:00"
    assert cli.format_time(25 * 60 + 7) == "00:25:07"
    assert cli.format_time(3661) == "01:01:01"


def test_progress_line_fills_bar():
    interval = scheduler.Interval.pomodoro(1)
    assert cli.progress_line(interval, 0, 60).endswith("[>" + "-" * 24 + "]")
    assert cli.progress_line(interval, 60, 60).endswith("[" + "#" * 25 + "]")
    assert "Pomodoro" in cli.progress_line(interval, 30, 60)


def test_run_interval_sleeps_once_per_second(monkeypatch, capsys):
    sleeps = []
    monkeypatch.setattr(cli.time, "sleep", sleeps.append)
    cli.run_interval(scheduler.Interval.short_break(1), second_length=0.5)
    assert sleeps == [0.5] * 60
    assert "✓ Short break" in capsys.readouterr().out


def test_main_dry_run_prints_one_cycle(no_config_file, capsys):
    assert cli.main(["do", "reading", "--dry-run", "-r", "2", "-l", "15"]) == 0
    out = capsys.readouterr().out
    assert "On task reading" in out
    assert "- Pomodoro: 25 minute(s)" in out
    assert "- Long break: 15 minute(s)" in out
    assert out.count("- Pomodoro") == 2


def test_main_reports_completed_pomodoros(no_config_file, monkeypatch, capsys):
    answers = iter(["y", "y", "y", "n"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    monkeypatch.setattr(cli, "run_interval", lambda interval, second_length: None)
    monkeypatch.setattr(cli.notification, "send", lambda title, body: True)

    assert cli.main(["do", "coding"]) == 0
    assert "You've done 2 pomodoros." in capsys.readouterr().out


def test_main_config_error_exits_before_any_interval(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.toml"
    path.write_text("repetition = 0\n", encoding="utf-8")

    def fail(prompt):
        raise AssertionError("prompted despite configuration error")

    monkeypatch.setattr("builtins.input", fail)
    assert cli.main(["do", "task", "--config", str(path)]) == cli.EXIT_CONFIG_ERROR
    assert "repetition must be positive" in capsys.readouterr().err


def test_main_malformed_config_exits_with_error(tmp_path, capsys):
    path = tmp_path / "config.toml"
    path.write_text("duration: 25\n", encoding="utf-8")
    assert cli.main(["do", "task", "--config", str(path)]) == cli.EXIT_CONFIG_ERROR
    assert capsys.readouterr().err.startswith("error:")
