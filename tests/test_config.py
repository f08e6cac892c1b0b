import pytest

from trustay import config


@pytest.fixture(autouse=True)
def _isolated_settings():
    config.clear_runtime_overrides()
    yield
    config.clear_runtime_overrides()
    config.refresh_settings()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("TRUSTAY_API_URL", "https://api.trustay.test")
    monkeypatch.setenv("TRUSTAY_PAGE_SIZE", "50")
    monkeypatch.setenv("TRUSTAY_REQUEST_TIMEOUT", "2.5")

    settings = config.Settings()
    assert settings.api_base_url == "https://api.trustay.test"
    assert settings.default_page_size == 50
    assert settings.request_timeout_seconds == 2.5


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("TRUSTAY_PAGE_SIZE", "twenty")
    monkeypatch.setenv("TRUSTAY_PDF_RETRY_DELAY", "soon")

    settings = config.Settings()
    assert settings.default_page_size == 20
    assert settings.pdf_retry_delay_seconds == 1.0


def test_empty_string_counts_as_unset(monkeypatch):
    monkeypatch.setenv("TRUSTAY_ACCESS_TOKEN", "")
    assert config.Settings().access_token is None


def test_runtime_overrides_apply_to_cached_settings(monkeypatch):
    monkeypatch.delenv("TRUSTAY_API_URL", raising=False)
    settings = config.refresh_settings()
    config.update_runtime_overrides({"api_base_url": "http://override.test", "access_token": None})

    assert settings.api_base_url == "http://override.test"
    assert config.get_settings().api_base_url == "http://override.test"

    config.clear_runtime_overrides()
    assert config.refresh_settings().api_base_url == "http://localhost:3000"
