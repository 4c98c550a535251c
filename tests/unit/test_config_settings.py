"""Tests for settings loading from the environment and /run/secrets."""
import logging

import pytest

from xkepster.config.settings import (
    DEFAULT_BASE_URL,
    Configuration,
    LogLevel,
    configure,
    get_config,
    load_settings,
    reset_configuration,
)


def test_defaults_without_environment():
    cfg = load_settings()

    assert cfg.api_key is None
    assert cfg.has_api_key is False
    assert cfg.base_url == DEFAULT_BASE_URL == "https://api.xkepster.com"
    assert cfg.timeout == 30
    assert cfg.open_timeout == 5
    assert cfg.logging_enabled is False
    assert cfg.log_level is LogLevel.INFO
    assert cfg.webhook_secret is None
    assert cfg.machine_token is None
    assert cfg.user_agent.startswith("xkepster-python ")
    assert " Python " in cfg.user_agent


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("XKEPSTER_API_KEY", "sk_env")
    monkeypatch.setenv("XKEPSTER_BASE_URL", "https://eu.xkepster.com")
    monkeypatch.setenv("XKEPSTER_TIMEOUT", "12.5")
    monkeypatch.setenv("XKEPSTER_OPEN_TIMEOUT", "2")
    monkeypatch.setenv("XKEPSTER_LOG_LEVEL", "debug")
    monkeypatch.setenv("XKEPSTER_LOGGING_ENABLED", "true")
    monkeypatch.setenv("XKEPSTER_WEBHOOK_SECRET", "whsec_env")
    monkeypatch.setenv("XKEPSTER_MACHINE_TOKEN", "mt_env")

    cfg = load_settings()

    assert cfg.api_key == "sk_env"
    assert cfg.base_url == "https://eu.xkepster.com"
    assert cfg.timeout == 12.5
    assert cfg.open_timeout == 2.0
    assert cfg.log_level is LogLevel.DEBUG
    assert cfg.logging_enabled is True
    assert cfg.webhook_secret == "whsec_env"
    assert cfg.machine_token == "mt_env"


@pytest.mark.parametrize("raw", ["false", "1", "yes", ""])
def test_logging_enabled_only_for_literal_true(monkeypatch, raw):
    monkeypatch.setenv("XKEPSTER_LOGGING_ENABLED", raw)
    assert load_settings().logging_enabled is False


def test_logging_enabled_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("XKEPSTER_LOGGING_ENABLED", "TRUE")
    assert load_settings().logging_enabled is True


def test_blank_base_url_uses_default(monkeypatch):
    monkeypatch.setenv("XKEPSTER_BASE_URL", "")
    assert load_settings().base_url == DEFAULT_BASE_URL


def test_invalid_timeout_names_the_variable(monkeypatch):
    monkeypatch.setenv("XKEPSTER_TIMEOUT", "thirty")

    with pytest.raises(ValueError, match="XKEPSTER_TIMEOUT"):
        load_settings()


def test_secret_file_takes_priority_over_environment(monkeypatch, _isolated_settings):
    secrets_dir = _isolated_settings
    (secrets_dir / "xkepster_api_key").write_text("sk_from_file\n")
    (secrets_dir / "xkepster_webhook_secret").write_text("whsec_from_file")
    monkeypatch.setenv("XKEPSTER_API_KEY", "sk_from_env")

    cfg = load_settings()

    assert cfg.api_key == "sk_from_file"
    assert cfg.webhook_secret == "whsec_from_file"


def test_empty_secret_file_falls_back_to_environment(monkeypatch, _isolated_settings):
    (_isolated_settings / "xkepster_machine_token").write_text("   \n")
    monkeypatch.setenv("XKEPSTER_MACHINE_TOKEN", "mt_env")

    assert load_settings().machine_token == "mt_env"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        ("warn", LogLevel.WARN),
        ("warning", LogLevel.WARN),
        ("error", LogLevel.ERROR),
        ("critical", LogLevel.FATAL),
        ("fatal", LogLevel.FATAL),
        ("verbose", LogLevel.INFO),
        (LogLevel.ERROR, LogLevel.ERROR),
    ],
)
def test_log_level_parse(raw, expected):
    assert LogLevel.parse(raw) is expected


def test_log_level_maps_to_logging_levels():
    assert LogLevel.DEBUG.logging_level == logging.DEBUG
    assert LogLevel.WARN.logging_level == logging.WARNING
    assert LogLevel.FATAL.logging_level == logging.CRITICAL


def test_configuration_normalises_log_level_string():
    assert Configuration(log_level="warning").log_level is LogLevel.WARN


def test_configuration_is_frozen():
    cfg = Configuration(api_key="k")
    with pytest.raises(AttributeError):
        cfg.api_key = "other"


def test_with_overrides_skips_none_values():
    cfg = Configuration(api_key="k", timeout=10)
    derived = cfg.with_overrides(api_key=None, timeout=3)

    assert derived.api_key == "k"
    assert derived.timeout == 3
    assert cfg.timeout == 10


def test_with_overrides_without_changes_returns_same_instance():
    cfg = Configuration(api_key="k")
    assert cfg.with_overrides(api_key=None) is cfg


def test_with_overrides_rejects_unknown_option():
    with pytest.raises(TypeError, match="retries"):
        Configuration().with_overrides(retries=3)


def test_repr_redacts_credentials():
    cfg = Configuration(api_key="sk_live_123", webhook_secret="whsec_456", machine_token="mt_789")
    text = repr(cfg)

    for secret in ("sk_live_123", "whsec_456", "mt_789"):
        assert secret not in text
    assert "[REDACTED]" in text


# ═════════════════════════════════════════════════════════════════════════════
# Process default
# ═════════════════════════════════════════════════════════════════════════════

def test_get_config_loads_once(monkeypatch):
    monkeypatch.setenv("XKEPSTER_API_KEY", "sk_first")
    first = get_config()
    monkeypatch.setenv("XKEPSTER_API_KEY", "sk_second")

    assert get_config() is first
    assert get_config().api_key == "sk_first"


def test_configure_replaces_default():
    updated = configure(api_key="sk_configured", log_level="error")

    assert get_config() is updated
    assert get_config().api_key == "sk_configured"
    assert get_config().log_level is LogLevel.ERROR


def test_configure_rejects_unknown_option():
    with pytest.raises(TypeError):
        configure(api_url="https://example.com")


def test_reset_configuration_reloads_environment(monkeypatch):
    configure(api_key="sk_configured")
    monkeypatch.setenv("XKEPSTER_API_KEY", "sk_env")

    reset_configuration()

    assert get_config().api_key == "sk_env"
