from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3001
    cors_allowed_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    api_base_url: str = "http://localhost:3001"
    upload_max_bytes: int = 10 * 1024 * 1024

    pdf_engine: str = "pymupdf"
    page_min_chars: int = 50
    document_min_chars: int = 100
    render_scale: float = 2.0

    ocr_language: str = "eng"
    ocr_ready_timeout_seconds: float = 6.0
    ocr_poll_interval_seconds: float = 0.15

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_temperature: float = 0.2
    openai_timeout_seconds: int = 30

    chat_max_retries: int = 2
    chat_retry_base_delay_ms: int = 2000
    chat_retry_max_delay_ms: int = 8000
    dev_stub_on_error: bool = False

    analysis_max_chars: int = 8000
    analysis_sample_chars: int = 1000

    notifications_path: str = "data/notifications.json"

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allowed_origins.split(",")
            if origin.strip()
        ]
