from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

PLACEHOLDER_API_KEY = "your_gemini_api_key_here"


class GeminiSettings(BaseSettings):
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 30.0  # Per attempt, independent of the backoff schedule
    max_retries: int = 3
    base_delay_seconds: float = 1.0

    model_config = SettingsConfigDict(env_prefix='GEMINI_')

    @property
    def has_credentials(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


class AppSettings(BaseSettings):
    log_level: str = "INFO"
    json_logs: bool = True
    cors_allow_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix='APP_')


def get_gemini_settings() -> GeminiSettings:
    return GeminiSettings()


def get_app_settings() -> AppSettings:
    return AppSettings()


if __name__ == "__main__":
    # For checking the configuration loading
    gemini = get_gemini_settings()
    app_settings = get_app_settings()
    print("Gemini Configuration:")
    print(f"  Model: {gemini.model}")
    print(f"  Base URL: {gemini.base_url}")
    print(f"  Credentials configured: {gemini.has_credentials}")
    # API key is intentionally not printed for security
    print(f"  Timeout: {gemini.timeout_seconds}s, retries: {gemini.max_retries}, base delay: {gemini.base_delay_seconds}s")
    print("\nApp Configuration:")
    print(f"  Log level: {app_settings.log_level}")
    print(f"  JSON logs: {app_settings.json_logs}")
    print(f"  CORS origins: {app_settings.cors_allow_origins}")
    print("\nTo override, set environment variables like GEMINI_API_KEY, GEMINI_MODEL, APP_LOG_LEVEL.")
