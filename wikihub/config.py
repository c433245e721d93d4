from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_SESSION_SECRET = "a-very-long-random-secret-key-change-this!"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "WikiHub"
    app_env: str = "development"
    database_url: str = Field(default="sqlite:///./wikihub.db")
    session_secret: str = Field(default=DEFAULT_SESSION_SECRET)
    session_cookie: str = "wikihub_session"
    session_max_age: int = 15 * 60
    csrf_enabled: bool = True
    upload_dir: Path = Field(default=PACKAGE_DIR / "static" / "avatars")
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    seed_demo_content: bool = True
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def token_secret(self) -> str:
        return self.jwt_secret or self.session_secret


settings = Settings()
