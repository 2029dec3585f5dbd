"""Client settings loaded from environment variables."""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class ClientSettings:
    """Settings for the API client and command-line front end."""

    def __init__(self) -> None:
        self.API_URL: str = os.getenv("TASKAPP_API_URL", "http://localhost:8000/api")
        self.CREDENTIALS_PATH: Path = Path(
            os.getenv(
                "TASKAPP_CREDENTIALS",
                str(Path.home() / ".config" / "taskapp" / "credentials.json"),
            )
        )
        self.TIMEOUT_SECONDS: float = float(os.getenv("TASKAPP_TIMEOUT", "10"))


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
