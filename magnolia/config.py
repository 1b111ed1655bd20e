"""
Runtime configuration.

Values come from the environment, with a .env file at the project root
loaded first.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_FSP_API_URL = "https://api.flightschedulepro.com"


def get_db_path() -> Optional[Path]:
    """Store location override (MAGNOLIA_DB_PATH), or None for the default."""
    value = os.getenv("MAGNOLIA_DB_PATH")
    return Path(value).expanduser() if value else None


def get_log_level() -> str:
    return os.getenv("MAGNOLIA_LOG_LEVEL", "INFO").upper()


@dataclass
class FspSettings:
    """Connection settings for the Flight Schedule Pro API."""
    base_url: str = DEFAULT_FSP_API_URL
    operator_id: str = ""
    api_key: str = ""

    @classmethod
    def from_env(cls) -> "FspSettings":
        return cls(
            base_url=os.getenv("FSP_API_URL") or DEFAULT_FSP_API_URL,
            operator_id=os.getenv("FSP_OPERATOR_ID", ""),
            api_key=os.getenv("FSP_API_KEY", ""),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.operator_id and self.api_key)
