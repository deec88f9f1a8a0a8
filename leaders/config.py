from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./leaders.db")
    SQL_ECHO: bool = Field(default=False)

    JWT_SECRET: str = Field(default="dev-secret-a-changer")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7)

    UPLOAD_DIR: str = Field(default="static/upload")
    MAX_PHOTO_SIZE: int = Field(default=5 * 1024 * 1024)  # 5MB
    MAX_POST_IMAGE_SIZE: int = Field(default=10 * 1024 * 1024)  # 10MB

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    # Comptes promus Admin dès l'inscription
    ADMIN_EMAILS: List[str] = Field(default_factory=list)

    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
