"""
Application settings loaded from environment variables.

``JWT_SECRET`` and ``DATABASE_URL`` have no defaults: a process started
without them fails at import time instead of serving requests.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = Field(..., min_length=1)          # HMAC secret for session tokens
    jwt_expiry_seconds: int = Field(604800, gt=0)       # 7 days

    # ── Password hashing ─────────────────────────────────────────────────
    password_hash_rounds: int = Field(12, ge=4, le=31)  # bcrypt cost factor
    password_hash_layers: int = Field(10, ge=1)         # bcrypt passes at write time

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(..., min_length=1)

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5001
    host: str = "0.0.0.0"
    debug: bool = False
    environment: str = "development"
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
