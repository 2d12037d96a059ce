from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(env_file=".env", case_sensitive=True)

    DATABASE_URL: str
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS configuration: comma-separated origins
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    # Public write endpoints (lead capture, uploads, intake) are rate limited
    RATE_LIMIT_ENABLED: bool = True
    PUBLIC_WRITE_RATE_LIMIT: str = "10/minute"

    # Cookie consulted when no bearer token is sent
    SESSION_COOKIE_NAME: str = "session_token"

    # Business rule configuration
    MAX_FILE_SIZE: int = 10_485_760  # 10 MiB, inclusive
    QUOTE_NUMBER_MAX_ATTEMPTS: int = 10

    # Chat ticket collaborator; empty means in-process submission
    TICKET_SERVICE_URL: str = ""
    TICKET_SERVICE_TIMEOUT: float = 5.0


settings = Settings()
