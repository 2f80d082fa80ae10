from enum import StrEnum
from functools import lru_cache
import os

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(StrEnum):
    dev = "dev"
    stage = "stage"
    prod = "prod"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(os.getenv("ENV_FILE", ".env"), ".env.dev", ".env.stage", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_prefix="",
        populate_by_name=True,
    )

    app_env: AppEnv = Field(default=AppEnv.dev, alias="APP_ENV", description="Application environment (dev/stage/prod)")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    neo4j_uri: str = Field(default="", alias="NEO4J_URI")
    neo4j_user: str = Field(default="", alias="NEO4J_USER")
    neo4j_password: SecretStr = Field(default=SecretStr(""), alias="NEO4J_PASSWORD")

    layout_spacing: float = Field(default=150.0, ge=50.0, le=400.0, alias="LAYOUT_SPACING")
    layout_center_x: float = Field(default=400.0, alias="LAYOUT_CENTER_X")
    layout_center_y: float = Field(default=300.0, alias="LAYOUT_CENTER_Y")
    grid_size: int = Field(default=50, gt=0, alias="GRID_SIZE")
    force_iterations: int = Field(default=300, gt=0, alias="FORCE_ITERATIONS")

    history_depth: int = Field(default=10, gt=0, alias="HISTORY_DEPTH")
    duplicate_offset: float = Field(default=50.0, alias="DUPLICATE_OFFSET")

    base_points: int = Field(default=70, ge=0, alias="BASE_POINTS")
    bonus_points: int = Field(default=5, ge=0, alias="BONUS_POINTS")
    bonus_level_step: int = Field(default=10, gt=0, alias="BONUS_LEVEL_STEP")

    notice_feed_size: int = Field(default=50, gt=0, alias="NOTICE_FEED_SIZE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
