import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

DEFAULT_STORE_PATH = "childrisk_store.json"
# US-style locale rendering, e.g. "01/15/2025, 10:30:00 AM"
DEFAULT_DATE_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read from the environment (and .env).
    """
    store_path: str = DEFAULT_STORE_PATH
    inference_delay_seconds: float = 0.0
    display_tz_name: Optional[str] = None
    date_format: str = DEFAULT_DATE_FORMAT
    alert_webhook_url: Optional[str] = None

    @property
    def display_tz(self) -> Optional[tzinfo]:
        """None means the host's local timezone."""
        if not self.display_tz_name:
            return None
        return ZoneInfo(self.display_tz_name)

    @classmethod
    def from_env(cls) -> "Settings":
        delay = os.getenv("INFERENCE_DELAY_SECONDS", "0")
        try:
            delay_seconds = max(0.0, float(delay))
        except ValueError:
            raise ValueError(f"INFERENCE_DELAY_SECONDS must be a number, got {delay!r}")

        return cls(
            store_path=os.getenv("CHILDRISK_STORE_PATH", DEFAULT_STORE_PATH),
            inference_delay_seconds=delay_seconds,
            display_tz_name=os.getenv("CHILDRISK_DISPLAY_TZ") or None,
            date_format=os.getenv("CHILDRISK_DATE_FORMAT", DEFAULT_DATE_FORMAT),
            alert_webhook_url=os.getenv("RISK_ALERT_WEBHOOK_URL") or None,
        )
