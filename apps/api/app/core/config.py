"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    jwt_secret: str = Field(min_length=1)
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    token_ttl_days: int = Field(default=7, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    environment: Literal["development", "production", "test"] = "production"

    model_config = SettingsConfigDict(env_prefix="ONELINK_", extra="ignore")

    @property
    def expose_error_detail(self) -> bool:
        return self.environment == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
