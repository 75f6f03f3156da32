"""Application configuration via environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "info"
    json_logs: bool = False

    # axe-core (Playwright)
    axe_timeout_ms: int = 30000
    axe_browser: str = "chromium"

    # Lighthouse CLI
    lighthouse_bin: str = "lighthouse"
    lighthouse_timeout_ms: int = 60000
    lighthouse_chrome_flags: list[str] = ["--headless", "--no-sandbox"]

    # WAVE API
    wave_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("A11Y_MCP_WAVE_API_KEY", "WAVE_API_KEY"),
    )
    wave_api_url: str = Field(
        default="https://wave.webaim.org/api/request",
        validation_alias=AliasChoices("A11Y_MCP_WAVE_API_URL", "WAVE_API_URL"),
    )
    wave_timeout_seconds: float = 30.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "A11Y_MCP_",
        "extra": "ignore",
        "populate_by_name": True,
    }


settings = Settings()
