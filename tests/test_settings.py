import logging

from springops.app import build_arg_parser, settings_from_args
from springops.logging_conf import configure_logging
from springops.settings import DEFAULT_API_URL, settings_from_env


def test_env_and_overrides(monkeypatch):
    monkeypatch.setenv("SPRINGOPS_API_URL", "https://erp.example.test/api/")
    monkeypatch.setenv("SPRINGOPS_POLL_SECONDS", "1")
    settings = settings_from_env(port=9000, log_level=None)
    assert settings.api_base_url == "https://erp.example.test/api"
    assert settings.poll_interval_seconds == 5.0
    assert settings.port == 9000
    assert settings.log_level == "INFO"


def test_defaults_without_env(monkeypatch):
    for name in ("SPRINGOPS_API_URL", "SPRINGOPS_POLL_SECONDS", "SPRINGOPS_LOG_LEVEL", "SPRINGOPS_STORAGE_SECRET"):
        monkeypatch.delenv(name, raising=False)
    assert settings_from_env().api_base_url == DEFAULT_API_URL


def test_cli_arguments(monkeypatch):
    monkeypatch.delenv("SPRINGOPS_API_URL", raising=False)
    args = build_arg_parser().parse_args(["--port", "8181", "--api-url", "http://10.0.0.5:8000/api"])
    settings = settings_from_args(args)
    assert settings.port == 8181
    assert settings.api_base_url == "http://10.0.0.5:8000/api"


def test_configure_logging_falls_back_to_info():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        assert configure_logging("debug") == logging.DEBUG
        assert len(root.handlers) == 1
        assert configure_logging("chatty") == logging.INFO
        assert len(root.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
