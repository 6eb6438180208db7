"""Application settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings pulled from MAPGEN_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="MAPGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    # Map generation
    default_map_width: int = Field(default=512, gt=0, description="Default map width")
    default_map_height: int = Field(default=512, gt=0, description="Default map height")
    max_map_size: int = Field(default=4096, gt=0, description="Maximum map width or height")
    default_output: str = Field(default="out.png", description="Default output image")


settings = Settings()
