from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Banking API"
    database_url: str = "sqlite:///banking_api.db"
    database_timeout: float = 30.0
    log_level: str = "INFO"

    default_starting_balance: Decimal = Decimal("1")
    transfer_max_attempts: int = 3
    transfer_retry_delay_ms: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BANKING_",
        extra="ignore",
    )

    @property
    def transfer_retry_delay(self) -> float:
        return self.transfer_retry_delay_ms / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
