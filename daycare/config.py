import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from daycare.utils.llm import AIModel

logger = structlog.get_logger()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App Settings
    ENVIRONMENT: str = "local"

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Daycare"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # PostgreSQL Settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "daycare"
    POSTGRES_PORT: str = "5432"

    # Full SQLAlchemy URL, overrides the POSTGRES_* settings when set
    DATABASE_URL: str = ""
    DB_ECHO_QUERIES: bool = False

    # Third Party Services
    GEMINI_API_KEY: str = ""
    LLM_MODEL: AIModel = AIModel.GEMINI_FLASH_2_0

    @property
    def get_sync_db_connect_args(self) -> dict:
        """Get database connection arguments based on environment (for sync)."""
        if self.ENVIRONMENT == "prod":
            return {"sslmode": "require"}
        return {}

    @property
    def is_postgres(self) -> bool:
        return self.DATABASE_URI.startswith("postgresql")

    @property
    def DATABASE_URI(self) -> str:
        """Builds database URI dynamically."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @classmethod
    def load_from_env_file(cls):
        """Load settings from .env file in local development."""
        from pathlib import Path

        from dotenv import load_dotenv

        # Always load .env file if it exists
        env_file = Path(".env")
        if env_file.exists():
            load_dotenv(env_file, override=True)

        return cls()


settings = Settings.load_from_env_file()
