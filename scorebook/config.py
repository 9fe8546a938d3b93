"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "scorebook.db")

    # Comma-separated origins added to the local dev defaults
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Longest match the setup validator accepts
    MAX_MATCH_OVERS: int = int(os.getenv("MAX_MATCH_OVERS", "50"))


settings = Settings()
