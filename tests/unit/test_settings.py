import pytest
from pydantic import ValidationError

from circulars.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert Settings().app_env == "dev"

    def test_default_port(self) -> None:
        assert Settings().port == 3001

    def test_default_pdf_engine(self) -> None:
        assert Settings().pdf_engine == "pymupdf"

    def test_default_scan_thresholds(self) -> None:
        s = Settings()
        assert s.page_min_chars == 50
        assert s.document_min_chars == 100
        assert s.render_scale == 2.0

    def test_default_ocr_wait(self) -> None:
        s = Settings()
        assert s.ocr_ready_timeout_seconds == 6.0
        assert s.ocr_poll_interval_seconds == 0.15

    def test_default_model(self) -> None:
        s = Settings()
        assert s.openai_model_name == "gpt-4o-mini"
        assert s.openai_temperature == 0.2

    def test_default_retry_policy(self) -> None:
        s = Settings()
        assert s.chat_max_retries == 2
        assert s.chat_retry_base_delay_ms == 2000
        assert s.chat_retry_max_delay_ms == 8000
        assert s.dev_stub_on_error is False

    def test_default_upload_limit(self) -> None:
        assert Settings().upload_max_bytes == 10 * 1024 * 1024


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        assert Settings().app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().log_level == "DEBUG"

    def test_loads_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert Settings().openai_api_key == "sk-env"

    def test_loads_dev_stub_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEV_STUB_ON_ERROR", "true")
        assert Settings().dev_stub_on_error is True

    def test_cors_origins_are_split(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://a.test, ,http://b.test")
        assert Settings().cors_origins == ["http://a.test", "http://b.test"]


class TestSettingsValidation:
    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_retry_count_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAT_MAX_RETRIES", "abc")
        with pytest.raises(ValidationError):
            Settings()
