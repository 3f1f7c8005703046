"""Runtime configuration loaded from environment variables and .env file."""

import logging
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from railfog.core.item.registry import DEFAULT_ITEMS_PATH, DEFAULT_RECIPES_PATH
from railfog.core.rest import EncounterMode


class Settings(BaseSettings):
    """Runtime settings.

    Values are loaded from environment variables first,
    then from a .env file in the working directory as fallback.
    Balance constants are not settings; they live in railfog.core.balance.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    LOG_LEVEL: str = "INFO"

    # None이면 매 판 다른 맵
    GAME_SEED: Optional[int] = None
    ENCOUNTER_MODE: EncounterMode = EncounterMode.DICE

    ITEM_DATA_PATH: str = str(DEFAULT_ITEMS_PATH)
    RECIPE_DATA_PATH: str = str(DEFAULT_RECIPES_PATH)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


settings = Settings()
