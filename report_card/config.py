# report_card/config.py
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_TITLE: str = "Report Card Generator"

    # Directory holding the <key>.json files of the file store
    DATA_DIR: str = "data"

    # Printed under the report card title
    ACADEMIC_YEAR: str = "2024-2025"

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="REPORT_CARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)


settings = Settings()
