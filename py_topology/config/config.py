from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Terrain Configuration
    default_width: int = Field(default=129, description="Default terrain width in pixels")
    default_height: int = Field(default=129, description="Default terrain height in pixels")
    default_density: int = Field(default=50, description="Default wall density (0-100)")
    max_width: int = Field(default=4096, description="Max allowed terrain width")
    max_height: int = Field(default=4096, description="Max allowed terrain height")
    max_scale: int = Field(default=16, description="Max display zoom factor")
    export_dir: str = Field(default="./exports", description="Directory for exported PNGs")

    # Lore Service Configuration
    lore_api_key: Optional[str] = Field(default=None, description="API key for the text generation service")
    lore_endpoint: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the text generation service",
    )
    lore_model: str = Field(default="gemini-3-flash-preview", description="Text generation model")
    lore_timeout_seconds: float = Field(default=30.0, description="Lore request timeout in seconds")
    lore_temperature: float = Field(default=0.8, description="Sampling temperature")
    lore_top_p: float = Field(default=0.95, description="Nucleus sampling cutoff")

    @property
    def cors_origins(self) -> list:
        """Split allowed_origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
