from __future__ import annotations

from dataclasses import dataclass
from os import getenv


@dataclass(slots=True)
class Settings:
    telegram_bot_token: str
    tba_auth_key: str
    tba_base_url: str
    tba_timeout_seconds: float

    @classmethod
    def from_env(cls) -> "Settings":
        token = getenv("TELEGRAM_BOT_TOKEN", "").strip()
        if not token:
            raise ValueError("Missing TELEGRAM_BOT_TOKEN")

        auth_key = getenv("TBA_AUTH_KEY", "").strip()
        if not auth_key:
            raise ValueError("Missing TBA_AUTH_KEY (create one on your TBA account page)")

        base_url = getenv(
            "TBA_BASE_URL",
            "https://www.thebluealliance.com/api/v3",
        ).strip()

        timeout = float(getenv("TBA_TIMEOUT_SECONDS", "20"))

        return cls(
            telegram_bot_token=token,
            tba_auth_key=auth_key,
            tba_base_url=base_url,
            tba_timeout_seconds=timeout,
        )
