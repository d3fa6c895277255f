import io
import sys

import pytest  # type: ignore

from stepparse.__main__ import main


def run_main(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["stepparse", *argv])
    with pytest.raises(SystemExit) as excinfo:
        main()
    return excinfo.value.code


def test_consumes_all_input(monkeypatch, capsys):
    assert run_main(monkeypatch, "1234") == 0
    out = capsys.readouterr().out
    assert "input: '1234'" in out
    assert "step 1: pending" in out
    assert "step 2: Success(['1', '2'], '34')" in out
    assert "input: '34'" in out
    assert "all input consumed" in out


def test_stops_on_failure(monkeypatch, capsys):
    assert run_main(monkeypatch, "12345") == 1
    out = capsys.readouterr().out
    assert "step 1: Failure()" in out
    assert out.splitlines()[-1] == "stopped at: '5'"


def test_quiet(monkeypatch, capsys):
    assert run_main(monkeypatch, "-q", "56") == 0
    out = capsys.readouterr().out
    assert "step" not in out
    assert "all input consumed" in out


def test_alternatives_and_ordered(monkeypatch, capsys):
    # Without --ordered the one-literal alternative finishes first.
    assert run_main(monkeypatch, "-a", "1 2", "-a", "1", "12") == 1
    assert "stopped at: '2'" in capsys.readouterr().out
    assert run_main(monkeypatch, "--ordered", "-a", "1 2", "-a", "1", "12") == 0
    assert "all input consumed" in capsys.readouterr().out


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("3412\n"))
    assert run_main(monkeypatch, "-") == 0


def test_max_steps(monkeypatch, capsys):
    assert run_main(monkeypatch, "--max-steps", "1", "12") == 1
    assert "ERROR:" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["--max-steps", "0"], ["--max-steps=-1"]])
def test_max_steps_must_be_positive(monkeypatch, capsys, argv):
    assert run_main(monkeypatch, *argv, "12") == 2
    assert "--max-steps must be at least 1" in capsys.readouterr().err


def test_show_grammar_and_stats(monkeypatch, capsys):
    assert run_main(monkeypatch, "-v", "--show-grammar", "12") == 0
    out = capsys.readouterr().out
    assert out.startswith("└──choice\n")
    assert "Caches sizes:" in out
    assert "parsers :         10" in out
    assert "total steps :         10" in out


def test_trace(monkeypatch, capsys):
    assert run_main(monkeypatch, "-vv", "-q", "12") == 0
    out = capsys.readouterr().out
    assert "set parser: str('1')" in out
    assert "hit task:" not in out


def test_show_tasks(monkeypatch, capsys):
    assert run_main(monkeypatch, "-q", "--show-tasks", "12") == 0
    out = capsys.readouterr().out
    assert "└──choice @ '12': Success(['1', '2'], '')" in out
    assert "str('2') @ '2': Success('2', '')" in out
