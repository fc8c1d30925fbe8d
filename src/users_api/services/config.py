from functools import lru_cache
from json import JSONDecodeError
from typing import List, Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings
from pydantic_settings.sources import (
    EnvSettingsSource,
    PydanticBaseSettingsSource,
)


class Settings(BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        class LenientEnvSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, field, value)
                except JSONDecodeError:
                    return value

        return (
            init_settings,
            LenientEnvSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )

    @field_validator("USERS_API_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_origins(cls, value: str | List[str] | Tuple[str, ...]) -> Tuple[str, ...]:
        if isinstance(value, str):
            origins = [item.strip() for item in value.split(",") if item.strip()]
        else:
            origins = [str(item).strip() for item in value if str(item).strip()]
        return tuple(sorted(set(origins), key=origins.index))

    @field_validator("MONGO_URI")
    @classmethod
    def require_uri(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("MONGO_URI must not be empty")
        return cleaned

    @model_validator(mode="after")
    def check_store_deadline(self) -> "Settings":
        # server selection must fail inside one attempt so the retry can run
        if self.USERS_API_SERVER_SELECTION_TIMEOUT_MS / 1000 >= self.USERS_API_STORE_TIMEOUT:
            raise ValueError("USERS_API_SERVER_SELECTION_TIMEOUT_MS must be shorter than USERS_API_STORE_TIMEOUT")
        return self

    MONGO_URI: str = Field(description="Document store connection string")
    USERS_API_DB_NAME: str = Field(default="usuarios_db", description="Database name")
    USERS_API_COLLECTION: str = Field(default="usuarios", description="Users collection name")
    USERS_API_LIST_LIMIT: int = Field(default=100, gt=0, description="Max users returned by a list request")
    USERS_API_STORE_TIMEOUT: float = Field(default=5.0, gt=0, description="Per-attempt store deadline, seconds")
    USERS_API_RETRY_ATTEMPTS: int = Field(default=3, ge=1, description="Attempts for transient store errors")
    USERS_API_SERVER_SELECTION_TIMEOUT_MS: int = Field(default=3000, gt=0, description="Server selection timeout")
    USERS_API_MAX_POOL_SIZE: int = Field(default=100, gt=0, description="Connection pool size")
    USERS_API_HOST: str = Field(default="0.0.0.0", description="Bind host")
    USERS_API_PORT: int = Field(default=8000, description="Bind port")
    USERS_API_LOG_LEVEL: str = Field(default="INFO", description="Log level")
    USERS_API_CORS_ORIGINS: Tuple[str, ...] = Field(default=("*",), description="Allowed CORS origins")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
