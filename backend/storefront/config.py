"""
Storefront Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory; services receive the values
       they need through their constructors.
When:  Loaded once at module import time; validated before app starts.

Tests build their own `Settings(...)` pointing at temporary directories and
hand it to `create_app()`, so the singleton never touches real data files.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Attributes are grouped by concern for readability.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # What: One embedded SQLite file per collection
    # Format: filesystem path; parent directories are created on startup
    products_db_path: str = Field(
        default="./data/db/products.db",
        description="Backing file of the products collection",
    )
    orders_db_path: str = Field(
        default="./data/db/orders.db",
        description="Backing file of the orders collection",
    )

    # ── File Storage ──────────────────────────────────────────────────────
    # What: Directory holding uploaded files, relative to backend CWD
    upload_dir: str = Field(default="./data/uploads")

    # What: Maximum allowed upload size in bytes
    # Default: 10MB = 10 * 1024 * 1024 = 10485760
    # Valid range: 1MB to 50MB
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # ── Orders ────────────────────────────────────────────────────────────
    # What: Flat per-unit price used to compute order totals.
    # NOTE: placeholder pricing, product prices are not looked up.
    order_unit_price: float = Field(default=10.0, ge=0)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # UPLOAD_DIR and upload_dir both work
    }


# Singleton instance used when create_app() is called without overrides
settings = Settings()
