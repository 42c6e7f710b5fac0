from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RIBAUNT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Signing (required at startup, see get_engine)
    secret: str | None = None
    jwt_algorithm: str = "HS256"

    # Proof of Work
    default_difficulty: int = 5  # ~1M hashes expected
    default_amount: int = 4
    challenge_ttl_seconds: int = 30
    max_challenge_amount: int = 16

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Rate Limiting
    rate_limit_challenges: str = "20/minute"
    rate_limit_verify: str = "30/minute"
    trust_forwarded_for: bool = True

    # CORS
    cors_origins: list[str] | str = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return v


settings = Settings()
