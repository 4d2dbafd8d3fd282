"""Application settings using Pydantic Settings."""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_separated_list(v):
    """Parse comma-separated string into list."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if isinstance(v, list):
        return v
    return []


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Media Upload API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Storage
    storage_provider: str = Field(default="s3", alias="STORAGE_PROVIDER")
    aws_access_key_id: str = Field(default="", alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    s3_bucket_name: str = Field(default="media-uploads", alias="S3_BUCKET_NAME")

    # Oracle Cloud Storage
    oracle_access_key: str = Field(default="", alias="ORACLE_ACCESS_KEY")
    oracle_secret_key: str = Field(default="", alias="ORACLE_SECRET_KEY")
    oracle_bucket_name: str = Field(default="", alias="ORACLE_BUCKET_NAME")
    oracle_namespace: str = Field(default="", alias="ORACLE_NAMESPACE")

    # Wasabi
    wasabi_access_key: str = Field(default="", alias="WASABI_ACCESS_KEY")
    wasabi_secret_key: str = Field(default="", alias="WASABI_SECRET_KEY")
    wasabi_bucket_name: str = Field(default="", alias="WASABI_BUCKET_NAME")
    wasabi_endpoint: str = Field(
        default="https://s3.wasabisys.com", alias="WASABI_ENDPOINT"
    )

    # Mux
    mux_token_id: str = Field(default="", alias="MUX_TOKEN_ID")
    mux_token_secret: str = Field(default="", alias="MUX_TOKEN_SECRET")
    mux_api_url: str = Field(default="https://api.mux.com", alias="MUX_API_URL")
    mux_video_base_url: str = Field(
        default="https://stream.mux.com", alias="MUX_VIDEO_BASE_URL"
    )
    mux_thumbnail_base_url: str = Field(
        default="https://image.mux.com", alias="MUX_THUMBNAIL_BASE_URL"
    )
    mux_timeout_seconds: float = Field(default=30.0, alias="MUX_TIMEOUT_SECONDS")

    # CORS (stored as string, parsed via property)
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        alias="ALLOWED_ORIGINS",
        exclude=True,  # Don't include in model dump
    )

    @property
    def allowed_origins(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return parse_comma_separated_list(self.allowed_origins_str)

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    batch_upload_rate_limit: str = Field(
        default="5/minute", alias="BATCH_UPLOAD_RATE_LIMIT"
    )

    # File Upload
    max_video_size_mb: int = Field(default=100, alias="MAX_VIDEO_SIZE_MB")
    max_image_size_mb: int = Field(default=5, alias="MAX_IMAGE_SIZE_MB")
    max_files_per_request: int = Field(default=10, alias="MAX_FILES_PER_REQUEST")
    max_concurrent_uploads: int = Field(default=3, ge=1, alias="MAX_CONCURRENT_UPLOADS")
    verify_uploads: bool = Field(default=True, alias="VERIFY_UPLOADS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def max_video_size_bytes(self) -> int:
        """Convert max video size from MB to bytes."""
        return self.max_video_size_mb * 1024 * 1024

    @property
    def max_image_size_bytes(self) -> int:
        """Convert max image size from MB to bytes."""
        return self.max_image_size_mb * 1024 * 1024


# Global settings instance
settings = Settings()
