"""Client-side settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for talking to a SustainaView server.

    Read from ``SUSTAINAVIEW_*`` environment variables or ``.env``.
    """

    server_url: str = Field(default="http://localhost:8000")
    request_timeout: float = Field(default=30.0)
    analysis_timeout: float = Field(default=90.0)
    generation_timeout: float = Field(default=120.0)
    listing_timeout: float = Field(default=30.0)
    search_location: str = Field(default="United States")
    search_results: int = Field(default=3, ge=1, le=20)

    model_config = SettingsConfigDict(env_prefix="SUSTAINAVIEW_", env_file=".env", extra="ignore")
