import logging

from halls.logging_config import configure_logging


def test_env_level_is_honoured(monkeypatch):
    monkeypatch.setenv("HALLS_LOG_LEVEL", "warning")
    configure_logging()
    assert logging.getLogger().level == logging.WARNING


def test_debug_flag_wins_and_handlers_are_replaced(monkeypatch):
    monkeypatch.setenv("HALLS_LOG_LEVEL", "ERROR")
    configure_logging(debug=True)
    configure_logging(debug=True)
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_unknown_level_falls_back(monkeypatch):
    monkeypatch.setenv("HALLS_LOG_LEVEL", "chatty")
    configure_logging(default_level=logging.INFO)
    assert logging.getLogger().level == logging.INFO
