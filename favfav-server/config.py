"""
Configuration Management for favfav Server
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application Settings"""

    # Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 8002
    cors_origins: str = "*"  # Comma-separated

    # Build Pipeline
    max_workers: int = 4
    build_timeout_seconds: float = 60.0
    core_includes_512: bool = False

    # Uploads
    max_upload_size_mb: int = 10
    max_image_pixels: int = 64_000_000

    # PWA Defaults
    default_app_name: str = "favfav"
    default_short_name: str = "favfav"
    default_theme_color: str = "#6366f1"

    # Download
    archive_filename: str = "favfavicon.zip"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of allowed CORS origins"""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


# Global settings instance
settings = Settings()
