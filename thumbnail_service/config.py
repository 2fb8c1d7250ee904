"""
Configuration settings for the Thumbnail Service.
"""

from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Placeholder substituted with the owner id in the private thumbnail template
USER_PLACEHOLDER = "{user}"


class Settings(BaseSettings):
    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Thumbnail Service"
    VERSION: str = "0.1.0"

    # Development mode (local filesystem storage instead of Data Lake)
    DEV_MODE: bool = False

    # Logging
    LOG_LEVEL: Optional[str] = None
    LOG_DIR: Optional[str] = None

    # Storage
    STORAGE_CONNECTION_STRING: str = ""
    LOCAL_STORAGE_ROOT: str = "storage"
    USER_CONTAINER_NAME: str = "main"

    # Thumbnail generation
    THUMBNAIL_MAX_HEIGHT: int = Field(200, ge=1, le=2048)
    THUMBNAIL_JPEG_QUALITY: int = Field(80, ge=1, le=100)
    ALLOWED_MIME_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/webp",
    ]
    THUMBNAIL_PATH_PUBLIC: str = "public/thumbnails"
    THUMBNAIL_PATH_PRIVATE: str = "users/{user}/thumbnails"
    STRICT_IMAGE_VALIDATION: bool = True

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

    @model_validator(mode="after")
    def check_connection_string(self) -> "Settings":
        if not self.DEV_MODE and not self.STORAGE_CONNECTION_STRING:
            raise ValueError("STORAGE_CONNECTION_STRING is required unless DEV_MODE is enabled")
        return self


class ThumbnailConfig(BaseModel):
    """
    Immutable thumbnail generation settings handed to the processing service.
    """

    model_config = ConfigDict(frozen=True)

    max_height: int = Field(..., ge=1, le=2048)
    jpeg_quality: int = Field(..., ge=1, le=100)
    allowed_mime_types: Tuple[str, ...] = Field(..., min_length=1)
    thumbnail_path_public: str = Field(..., min_length=1)
    thumbnail_path_private: str
    connection_string: str = ""
    strict_image_validation: bool = True

    @field_validator("thumbnail_path_private")
    @classmethod
    def validate_private_template(cls, v: str) -> str:
        if USER_PLACEHOLDER not in v:
            raise ValueError(f"Private thumbnail path must contain the {USER_PLACEHOLDER} placeholder")
        return v

    def private_thumbnail_dir(self, user: str) -> str:
        """Substitute the owner id into the private thumbnail template."""
        return self.thumbnail_path_private.replace(USER_PLACEHOLDER, user)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ThumbnailConfig":
        return cls(
            max_height=settings.THUMBNAIL_MAX_HEIGHT,
            jpeg_quality=settings.THUMBNAIL_JPEG_QUALITY,
            allowed_mime_types=tuple(settings.ALLOWED_MIME_TYPES),
            thumbnail_path_public=settings.THUMBNAIL_PATH_PUBLIC,
            thumbnail_path_private=settings.THUMBNAIL_PATH_PRIVATE,
            connection_string=settings.STORAGE_CONNECTION_STRING,
            strict_image_validation=settings.STRICT_IMAGE_VALIDATION,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_thumbnail_config() -> ThumbnailConfig:
    return ThumbnailConfig.from_settings(get_settings())
