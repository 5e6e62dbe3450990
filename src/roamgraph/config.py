"""Client configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://4c67k7zc26.execute-api.us-west-2.amazonaws.com/v1/alphaAPI"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    api_key: str | None = None
    api_token: str | None = None
    graph_name: str | None = None
    api_url: str = DEFAULT_API_URL
    content_type: str = "application/json"
    app_url: str = "https://roamresearch.com"

    model_config = SettingsConfigDict(
        env_prefix="ROAM_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

