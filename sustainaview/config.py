"""Application-wide configuration settings."""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv(override=True)

# Base paths
BASE_DIR = Path(__file__).parent
LOGS_DIR = BASE_DIR / "logs"


class PROVIDER_TYPE(Enum):
    GOOGLE = "google"


class FallbackIdentityMode(str, Enum):
    """How listings without an upstream id get their identity."""

    SESSION = "session"  # time + random token, only valid inside one session
    DETERMINISTIC = "deterministic"  # hash of (source, name, url)


class APISettings(BaseSettings):
    """API-related settings."""

    cors_origins: list[str] = Field(default=["*"], validation_alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class DatabaseSettings(BaseSettings):
    """Database-related settings."""

    mongodb_uri: str = Field(default="mongodb://localhost:27017", validation_alias="MONGODB_URI")
    database_name: str = Field(default="sustainaview", validation_alias="DATABASE_NAME")

    @property
    def uri(self) -> str:
        """Get the MongoDB connection URI."""
        return self.mongodb_uri

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class AISettings(BaseSettings):
    """AI-related settings."""

    google_api_key: SecretStr = Field(default=SecretStr(""), validation_alias="GOOGLE_API_KEY")
    default_provider: PROVIDER_TYPE = Field(default=PROVIDER_TYPE.GOOGLE)
    analysis_model: str = Field(default="gemini-2.5-flash", validation_alias="AI_ANALYSIS_MODEL")
    image_model: str = Field(default="gemini-2.5-flash-image", validation_alias="AI_IMAGE_MODEL")
    request_timeout: float = Field(default=90.0, validation_alias="AI_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class SearchSettings(BaseSettings):
    """Shopping search (SerpApi) settings."""

    serpapi_key: SecretStr = Field(default=SecretStr(""), validation_alias="SERPAPI_KEY")
    base_url: str = Field(default="https://serpapi.com/search", validation_alias="SEARCH_BASE_URL")
    max_results: int = Field(default=3, validation_alias="SEARCH_MAX_RESULTS")
    default_location: str = Field(default="United States", validation_alias="SEARCH_DEFAULT_LOCATION")
    timeout: float = Field(default=20.0, validation_alias="SEARCH_TIMEOUT")
    fallback_identity_mode: FallbackIdentityMode = Field(
        default=FallbackIdentityMode.SESSION, validation_alias="FALLBACK_IDENTITY_MODE"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class StorageSettings(BaseSettings):
    """Image blob store (S3) settings."""

    bucket_name: str = Field(default="", validation_alias="S3_BUCKET_NAME")
    region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    access_key_id: SecretStr = Field(default=SecretStr(""), validation_alias="AWS_ACCESS_KEY_ID")
    secret_access_key: SecretStr = Field(default=SecretStr(""), validation_alias="AWS_SECRET_ACCESS_KEY")
    endpoint_url: Optional[str] = Field(default=None, validation_alias="S3_ENDPOINT_URL")
    key_prefix: str = Field(default="sustainaView", validation_alias="S3_KEY_PREFIX")
    signed_url_ttl: int = Field(default=86400, validation_alias="SIGNED_URL_TTL")  # 24 hours
    signed_url_refresh_margin: int = Field(default=300, validation_alias="SIGNED_URL_REFRESH_MARGIN")
    max_dimension: int = Field(default=1024)
    jpeg_quality: int = Field(default=85)

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class LoggingSettings(BaseSettings):
    """Logging-related settings."""

    log_level: str = Field(default="INFO")
    file_log_level: str = Field(default="DEBUG")
    backup_count: int = Field(default=9)
    format: str = Field(default="%(name)s - %(levelname)s - %(message)s")
    file_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    enable_endpoint_logging: bool = Field(default=False, validation_alias="ENABLE_ENDPOINT_LOGGING")
    noisy_loggers: Dict[str, str] = Field(
        default={
            "urllib3": "WARNING",
            "uvicorn": "WARNING",
            "pymongo": "WARNING",
            "watchfiles": "WARNING",
            "httpx": "WARNING",
            "httpcore": "WARNING",
            "botocore": "WARNING",
            "boto3": "WARNING",
            "s3transfer": "WARNING",
            "PIL": "WARNING",
            "google_genai": "WARNING",
            "pymongo.topology": "WARNING",  # Suppress MongoDB topology logs
            "pymongo.connection": "WARNING",  # Suppress MongoDB connection logs
        }
    )

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


class Settings(BaseSettings):
    """Global settings container."""

    api: APISettings = Field(default_factory=APISettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ai: AISettings = Field(default_factory=AISettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    AUTH_SECRET_KEY: str = Field(default="", validation_alias="AUTH_SECRET_KEY")
    AUTH_TOKEN_LIFETIME: int = Field(default=3600, validation_alias="AUTH_TOKEN_LIFETIME")

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


# Create global settings instance
settings = Settings()
