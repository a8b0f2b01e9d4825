from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Ledger gateway (defaults match a local dev node)
    LEDGER_API_URL: str = "http://localhost:7740"
    SUBMITTER_API_URL: str = "http://localhost:7740"
    LEDGER_HTTP_TIMEOUT_SECONDS: float = 10.0

    # Transfer policy
    MAX_TRANSFER_AMOUNT: Decimal = Decimal("100000")
    # None or 0 disables the cap and leaves the attempt in SUBMITTING until settled
    SUBMIT_TIMEOUT_SECONDS: float | None = 60.0
    # Optional regex every recipient must match; None only rejects blanks
    RECIPIENT_PATTERN: str | None = None

    # Presentation
    COMPACT_LIST_SIZE: int = 3

    # App
    APP_NAME: str = "Token Wallet"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


settings = Settings()
