#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, populate_by_name=True)
    # Application Settings
    APP_NAME: str = "Newsroom API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True  # Can disable in production

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 3001))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./newsroom.db")

    # Security Settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="JWT_SECRET")
    REFRESH_SECRET_KEY: str = Field(default="change-me-in-prod-refresh", alias="JWT_REFRESH_SECRET")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # CORS Settings (accept comma-separated strings to avoid JSON parsing in env)
    FRONTEND_URL: str = os.environ.get("FRONTEND_URL", "http://localhost:3000")
    ALLOWED_ORIGINS: str = os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:3001,http://127.0.0.1:3000,http://127.0.0.1:3001",
    )
    ALLOWED_METHODS: str = os.environ.get("ALLOWED_METHODS", "GET,POST,PUT,PATCH,DELETE,OPTIONS")
    ALLOWED_HEADERS: str = os.environ.get(
        "ALLOWED_HEADERS", "Content-Type,Authorization,Accept,Origin,X-Requested-With,Content-Length"
    )
    CORS_ALLOW_CREDENTIALS: bool = True

    # Image Upload Settings
    MAX_REQUEST_SIZE: int = 10 * 1024 * 1024  # 10MB, base64 payloads included
    MAX_ORIGINAL_IMAGE_SIZE: int = 10 * 1024 * 1024  # 10MB
    MAX_IMAGE_SIZE: int = 1024 * 1024  # 1MB after compression
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png", "image/gif", "image/webp"]
    IMAGE_MAX_WIDTH: int = 1200
    IMAGE_MAX_HEIGHT: int = 800
    IMAGE_QUALITY: float = 0.8

    # Middleware settings
    GZIP_MIN_SIZE: int = 500  # bytes

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120

    # Accept comma-separated strings for list envs in addition to JSON arrays
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        origins = self._split_csv(self.ALLOWED_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.insert(0, self.FRONTEND_URL)
        return origins

    @property
    def allowed_methods_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_METHODS)

    @property
    def allowed_headers_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_HEADERS)


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # CORS_ORIGINS is accepted as an alias for ALLOWED_ORIGINS
    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        s.ALLOWED_ORIGINS = cors_env
    return s

settings: Settings = get_settings()
