from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.exceptions import ConfigurationError

DEFAULT_JWT_KEY = "secret-key-change-me"


def varenv(*varnames: str):
    return Field(default=..., validation_alias=AliasChoices(*varnames))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=True, alias="DEBUG")

    imagekit_public_key: str = varenv("IMAGEKIT_PUBLIC_KEY", "NEXT_PUBLIC_IMAGEKIT_PUBLIC_KEY")
    imagekit_private_key: str = varenv("IMAGEKIT_PRIVATE_KEY")
    imagekit_url_endpoint: HttpUrl = varenv(
        "IMAGEKIT_URL_ENDPOINT", "NEXT_PUBLIC_IMAGEKIT_URL_ENDPOINT"
    )
    imagekit_upload_folder: str = Field(default="/projects", alias="IMAGEKIT_UPLOAD_FOLDER")

    max_upload_bytes: int = Field(default=5 * 1024 * 1024, gt=0, alias="MAX_UPLOAD_BYTES")

    auth_jwt_key: str = Field(default=DEFAULT_JWT_KEY, alias="AUTH_JWT_KEY")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_issuer: str | None = Field(default=None, alias="AUTH_JWT_ISSUER")

    @model_validator(mode="after")
    def require_real_jwt_key(self) -> "Settings":
        if self.env == "prod" and self.auth_jwt_key == DEFAULT_JWT_KEY:
            raise ValueError("AUTH_JWT_KEY must be set in prod")
        return self


def load_settings() -> Settings:
    """Build settings from the environment, failing with the missing variable names."""
    try:
        return Settings()
    except ValidationError as exc:
        missing = sorted(
            {
                str(error["loc"][0]).upper()
                for error in exc.errors()
                if error["type"] == "missing" and error["loc"]
            }
        )
        if missing:
            raise ConfigurationError(
                f"Missing required settings: {', '.join(missing)}"
            ) from exc
        raise ConfigurationError(str(exc)) from exc


@lru_cache
def get_settings() -> Settings:
    return load_settings()
