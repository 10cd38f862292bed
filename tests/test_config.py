"""Tests for environment-driven settings."""

import logging

from trivia_quiz import config


def test_defaults(monkeypatch):
    for name in ("TRIVIA_QUESTIONS_PATH", "TRIVIA_ADVANCE_DELAY", "TRIVIA_STRICT_ANSWERS"):
        monkeypatch.delenv(name, raising=False)

    settings = config.Settings()

    assert settings.questions_path == config.QUESTIONS_PATH
    assert settings.advance_delay == config.ADVANCE_DELAY_SECONDS
    assert not settings.strict_answers


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TRIVIA_QUESTIONS_PATH", str(tmp_path / "bank.csv"))
    monkeypatch.setenv("TRIVIA_ADVANCE_DELAY", "1.5")
    monkeypatch.setenv("TRIVIA_STRICT_ANSWERS", "yes")

    settings = config.Settings()

    assert settings.questions_path == tmp_path / "bank.csv"
    assert settings.advance_delay == 1.5
    assert settings.strict_answers


def test_malformed_delay_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("TRIVIA_ADVANCE_DELAY", "soon")

    with caplog.at_level(logging.WARNING, logger="trivia_quiz.config"):
        settings = config.Settings()

    assert settings.advance_delay == config.ADVANCE_DELAY_SECONDS
    assert "TRIVIA_ADVANCE_DELAY" in caplog.text


def test_negative_delay_falls_back(monkeypatch):
    monkeypatch.setenv("TRIVIA_ADVANCE_DELAY", "-2")

    assert config.Settings().advance_delay == config.ADVANCE_DELAY_SECONDS
