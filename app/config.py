from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Service identity
    SERVICE_NAME: str = "svc-prodamus"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", validation_alias="ENVIRONMENT")

    LOG_LEVEL: str = "INFO"
    PORT: int = 3001

    # Prodamus REST
    PRODAMUS_TIMEOUT_SECONDS: float = 30.0

    # IANA zone used when checking that a new payment date is in the future.
    # Unset means server local time.
    PAYMENT_DATE_TIMEZONE: Optional[str] = None

    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"


settings = Settings()
