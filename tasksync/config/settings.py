"""
Application settings and configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import Optional
from tasksync.config.constants import COMPLETED_FIELD, DEFAULT_REQUEST_TIMEOUT

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables"""

    # Task service
    TASK_API_URL: str = os.getenv("TASK_API_URL", "")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT)))
    # "iscompleted" for services that name the flag that way
    TASK_COMPLETED_FIELD: str = os.getenv("TASK_COMPLETED_FIELD", COMPLETED_FIELD)

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

    @classmethod
    def validate(cls) -> bool:
        """
        Validate that the task service address is present

        Raises:
            ConfigurationError: If TASK_API_URL is not set
        """
        # Imported here: error_handler depends on the logger, which depends on settings
        from tasksync.utils.error_handler import ConfigurationError

        if not cls.TASK_API_URL.strip():
            raise ConfigurationError(
                "Missing required environment variable: TASK_API_URL"
            )

        return True


# Global settings instance
settings = Settings()
