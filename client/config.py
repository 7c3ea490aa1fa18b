"""
Client configuration.

Defaults are the values the chat service's own web page uses; the
environment can override the ones that vary per user.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from shared.utils import is_hex_color

DEFAULT_BASE_URL = "https://c.kuku.lu"
DEFAULT_PROFILE_NAME = "匿名とむ"
DEFAULT_PROFILE_COLOR = "#000000"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)

LOGIN_PATH = "/"
API_PATH = "/api_server.php"
ROOM_PATH = "/room.php"


@dataclass
class ChatConfig:
    """Settings for one ChatClient."""

    base_url: str = DEFAULT_BASE_URL
    profile_name: str = DEFAULT_PROFILE_NAME
    profile_color: str = DEFAULT_PROFILE_COLOR
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "ja,en-US;q=0.9,en;q=0.8"
    # None keeps httpx's default timeout
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    def validate(self) -> None:
        """Validate configuration values."""
        errors: List[str] = []

        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            errors.append("base_url must be an http(s) URL with a host")

        if not self.profile_name:
            errors.append("profile_name must be a non-empty string")

        if not is_hex_color(self.profile_color):
            errors.append("profile_color must look like #RRGGBB")

        if self.timeout is not None and self.timeout <= 0:
            errors.append("timeout must be positive")

        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))

    def browser_headers(self) -> Dict[str, str]:
        """Headers the room endpoint expects on a sendData post."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json, text/javascript, */*; q=0.01",
            "Accept-Language": self.accept_language,
            "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
            "Origin": self.base_url,
            "Referer": f"{self.base_url}/",
            "X-Requested-With": "XMLHttpRequest",
        }

    @classmethod
    def from_env(cls) -> "ChatConfig":
        """Build a config from KUKU_* environment variables."""
        timeout = os.getenv("KUKU_TIMEOUT")
        config = cls(
            base_url=os.getenv("KUKU_BASE_URL", DEFAULT_BASE_URL),
            profile_name=os.getenv("KUKU_PROFILE_NAME", DEFAULT_PROFILE_NAME),
            profile_color=os.getenv("KUKU_PROFILE_COLOR", DEFAULT_PROFILE_COLOR),
            timeout=float(timeout) if timeout else None,
        )
        config.validate()
        return config
