from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    project_name: str = Field(default="Catalog Admin", env="PROJECT_NAME")
    database_url: str = Field(..., env="DATABASE_URL")
    public_api_key: str = Field(..., env="PUBLIC_API_KEY")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    storage_root: str = Field(default="storage", env="STORAGE_ROOT")
    storage_public_url: str = Field(default="http://localhost:8000", env="STORAGE_PUBLIC_URL")
    storage_max_file_size_mb: int = Field(default=50, env="STORAGE_MAX_FILE_SIZE_MB")
    leads_page_size: int = Field(default=50, env="LEADS_PAGE_SIZE")
    smtp_host: str | None = Field(default=None, env="SMTP_HOST")
    smtp_port: int = Field(default=587, env="SMTP_PORT")
    smtp_username: str | None = Field(default=None, env="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, env="SMTP_PASSWORD")
    smtp_sender: str | None = Field(default=None, env="SMTP_SENDER")
    smtp_use_tls: bool = Field(default=True, env="SMTP_USE_TLS")
    notification_email: str | None = Field(default=None, env="NOTIFICATION_EMAIL")

    @model_validator(mode="after")
    def validate_security(self) -> "Settings":
        if len(self.public_api_key) < 16:
            raise ValueError("PUBLIC_API_KEY must be at least 16 characters long.")
        if "://" not in self.database_url:
            raise ValueError("DATABASE_URL must be a valid connection string.")
        if "://" not in self.storage_public_url:
            raise ValueError("STORAGE_PUBLIC_URL must be an absolute URL.")
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
