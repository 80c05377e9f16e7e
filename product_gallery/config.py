"""
Configuration management for the product image gallery service.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Product Image Gallery API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Ordered product image galleries with a single primary image per product"
    API_PREFIX: str = "/api/internal"

    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ]

    # Database Configuration
    # Empty value falls back to an in-memory SQLite database
    DATABASE_URL: str = ""
    # Create tables on startup (local SQLite runs); production uses Alembic
    AUTO_CREATE_TABLES: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # Gallery client configuration (used by product_gallery.client)
    GALLERY_API_BASE_URL: str = "http://localhost:8000/api/internal"
    GALLERY_API_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
