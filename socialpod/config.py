from typing import Optional
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./socialpod.db"

    # JWT access tokens
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Pod identity, used for federation handles and absolute media URLs
    POD_URL: str = "http://localhost:8000"

    # Media storage
    UPLOAD_DIR: str = "./uploads"
    MEDIA_URL: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    DEFAULT_AVATAR_URL: str = "/assets/user/default.png"

    # Email Configuration
    EMAIL_NOTIFICATIONS_ENABLED: bool = True
    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT_SECONDS: int = 8

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def pod_host(self) -> str:
        return urlparse(self.POD_URL).netloc or "localhost"

    @property
    def media_base_url(self) -> str:
        return f"{self.POD_URL.rstrip('/')}/{self.MEDIA_URL.strip('/')}"

    @property
    def default_avatar_url(self) -> str:
        if urlparse(self.DEFAULT_AVATAR_URL).scheme:
            return self.DEFAULT_AVATAR_URL
        return f"{self.POD_URL.rstrip('/')}/{self.DEFAULT_AVATAR_URL.lstrip('/')}"


settings = Settings()
