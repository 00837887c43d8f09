"""
Settings read from the environment (a local .env is loaded first).
"""

import os
from typing import Optional

from dotenv import load_dotenv

# dev convenience; in prod the platform injects env vars
load_dotenv()


class Config:
    APP_ENV: str = os.getenv("APP_ENV", "local")

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")

    # random.org
    RANDOM_ORG_BASE_URL: str = os.getenv("RANDOM_ORG_BASE_URL", "https://www.random.org/integers/")
    RANDOM_ORG_TIMEOUT_SECONDS: float = float(os.getenv("RANDOM_ORG_TIMEOUT_SECONDS", "3.0"))

    # Game settings
    CLASSIC_ATTEMPTS: int = int(os.getenv("CLASSIC_ATTEMPTS", "10"))
    TIMED_LIMIT_SECONDS: int = int(os.getenv("TIMED_LIMIT_SECONDS", "60"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def validate(cls) -> None:
        if cls.CLASSIC_ATTEMPTS <= 0:
            raise ValueError("CLASSIC_ATTEMPTS must be positive")
        if cls.TIMED_LIMIT_SECONDS <= 0:
            raise ValueError("TIMED_LIMIT_SECONDS must be positive")
        if cls.RANDOM_ORG_TIMEOUT_SECONDS <= 0:
            raise ValueError("RANDOM_ORG_TIMEOUT_SECONDS must be positive")


config = Config()
