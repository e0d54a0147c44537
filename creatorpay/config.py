"""
Application settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/creatorpay.db"

    # Admin access (empty disables the X-Admin-Key check)
    ADMIN_API_KEY: str = ""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Claim links
    PUBLIC_BASE_URL: str = "http://localhost:5173"
    CLAIM_TOKEN_BYTES: int = 24

    # Payouts
    DEFAULT_CURRENCY: str = "EUR"

    # File storage
    DATA_DIR: str = "./data"
    INVOICE_DIR: str = "./data/invoices"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
