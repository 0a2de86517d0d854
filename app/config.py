import os
from typing import List

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL", "sqlite:///./blocks.db")

    # Hosted Postgres hands out postgres:// but SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def _csv(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings:
    """Runtime configuration, read once from the environment."""

    PROJECT_NAME: str = "User Blocks API"
    ENV: str = os.getenv("ENV", "dev")

    DATABASE_URL: str = _database_url()

    # JWT signing. The fallback key is for local runs only.
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-only-user-blocks-key")
    ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)
    )

    CORS_ORIGINS: List[str] = _csv("CORS_ORIGINS", "*")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# Single instance that is imported everywhere
settings = Settings()
