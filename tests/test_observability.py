import logging

from contributions_api.core.observability import configure_logging
from contributions_api.core.observability import init_sentry
from contributions_api.settings import Settings


def test_init_sentry_skips_when_dsn_missing(monkeypatch) -> None:
    """Sentry initialization is skipped when DSN is absent."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("contributions_api.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(sentry_dsn=None)
    init_sentry(settings)

    assert calls == []


def test_init_sentry_initializes_sdk_with_settings(monkeypatch) -> None:
    """Sentry SDK is initialized with configured runtime settings."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("contributions_api.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(
        sentry_dsn="https://examplePublicKey@o0.ingest.sentry.io/0",
        environment="production",
        release="abc123",
        sentry_traces_sample_rate=0.2,
    )
    init_sentry(settings)

    assert len(calls) == 1
    assert calls[0] == {
        "dsn": "https://examplePublicKey@o0.ingest.sentry.io/0",
        "environment": "production",
        "release": "abc123",
        "traces_sample_rate": 0.2,
        "send_default_pii": False,
    }


def test_configure_logging_uses_settings_level(monkeypatch) -> None:
    """Logging is configured with the level from settings."""

    calls: list[dict[str, object]] = []

    def fake_basic_config(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr(
        "contributions_api.core.observability.logging.basicConfig", fake_basic_config
    )

    configure_logging(Settings(log_level="debug"))

    assert calls[0]["level"] == "DEBUG"
    assert logging.getLevelName(calls[0]["level"]) == logging.DEBUG


def test_settings_read_from_environment(monkeypatch) -> None:
    """Settings pick up overrides from environment variables."""

    monkeypatch.setenv("GITHUB_BASE_URL", "https://github.example.com")
    monkeypatch.setenv("CACHE_MAX_AGE_SECONDS", "60")

    settings = Settings()

    assert settings.github_base_url == "https://github.example.com"
    assert settings.cache_max_age_seconds == 60
