"""Tests for the coinboard command line."""

import pytest

from coinboard.cli import main


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch) -> None:
    monkeypatch.delenv("COINBOARD_ENABLE_API", raising=False)
    monkeypatch.delenv("COINBOARD_USE_COINCAP_ONLY", raising=False)


def test_prices_offline(capsys):
    assert main(["--offline", "prices"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[0].startswith("Bitcoin (BTC)")


def test_history_offline(capsys):
    assert main(["--offline", "history", "--hours", "2"]) == 0
    assert "8 points, synthetic" in capsys.readouterr().out


def test_watch_offline(capsys):
    assert main(["--offline", "watch", "--cycles", "2", "--interval", "0.01"]) == 0
    assert capsys.readouterr().out.count("Last update:") == 2


def test_invalid_hours_exit_code(capsys):
    assert main(["--offline", "history", "--hours", "48"]) == 1
    assert "hours must be" in capsys.readouterr().err


@pytest.mark.parametrize("command", [["history", "--hours", "0"], ["watch", "--hours", "0", "--cycles", "1"]])
def test_zero_hours_is_rejected(capsys, command):
    assert main(["--offline", *command]) == 1
    assert "hours must be" in capsys.readouterr().err


def test_zero_interval_is_rejected(capsys):
    assert main(["--offline", "watch", "--interval", "0", "--cycles", "1"]) == 1
    assert "refresh interval must be positive" in capsys.readouterr().err
