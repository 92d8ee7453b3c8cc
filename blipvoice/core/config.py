import json
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Blip Voice Calls Dashboard"
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    vapi_api_key: str = ""
    vapi_assistant_id: str = ""
    vapi_phone_number_id: str = ""
    vapi_base_url: str = "https://api.vapi.ai"
    vapi_timeout_seconds: float = 15.0

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    scoring_timeout_seconds: float = 30.0

    redis_url: str = ""
    start_call_limit: int = 30
    start_call_window_seconds: int = 60

    campaign_concurrency: int = 3
    campaign_interval_seconds: float = 1.0

    static_dir: str = "public"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_parse_json=False,
    )

    @field_validator("cors_origins", mode="before")
    def parse_cors_origins(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            cleaned = value.strip()
            if cleaned == "":
                return []
            if cleaned.startswith("["):
                return json.loads(cleaned)
            return [item.strip() for item in cleaned.split(",") if item.strip()]
        return [str(value)]

    @property
    def vapi_configured(self) -> bool:
        return bool(self.vapi_api_key and self.vapi_assistant_id and self.vapi_phone_number_id)


settings = Settings()
