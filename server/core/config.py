# server/core/config.py
"""Configuration and environment loading"""
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    # Database
    database_url: str = "sqlite:///./maintenance_desk.db"

    # Uploads
    upload_dir: str = "./public/files"
    max_upload_size: int = 5_000_000

    # Control numbers
    control_number_prefix: str = "RMF"
    control_number_max_attempts: int = 5

    # API
    api_title: str = "Maintenance Desk"
    api_version: str = "1.0.0"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Public intake rate limiting
    intake_rate_limit_enabled: bool = True
    intake_rate_limit: int = 10
    intake_rate_window: int = 3600  # seconds

    # Logging
    log_level: str = "INFO"
    sql_echo: Optional[bool] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()

# ==================== DATABASE ====================
DATABASE_URL = settings.database_url

# ==================== UPLOADS ====================
UPLOAD_DIR = settings.upload_dir
MAX_UPLOAD_SIZE = settings.max_upload_size

# ==================== CONTROL NUMBERS ====================
CONTROL_NUMBER_PREFIX = settings.control_number_prefix
CONTROL_NUMBER_MAX_ATTEMPTS = settings.control_number_max_attempts

# ==================== APP CONFIGURATION ====================
APP_HOST = settings.app_host
APP_PORT = settings.app_port
APP_DEBUG = settings.app_debug

# ==================== CORS CONFIGURATION ====================
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]

# ==================== RATE LIMITING ====================
INTAKE_RATE_LIMIT_ENABLED = settings.intake_rate_limit_enabled
INTAKE_RATE_LIMIT = settings.intake_rate_limit
INTAKE_RATE_WINDOW = settings.intake_rate_window

# ==================== LOGGING ====================
LOG_LEVEL = settings.log_level.upper()
SQL_ECHO = settings.sql_echo if settings.sql_echo is not None else APP_DEBUG
