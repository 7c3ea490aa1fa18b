from __future__ import annotations
from dataclasses import dataclass, field
from http.cookiejar import Cookie
from typing import Dict, List, Optional

import httpx


@dataclass
class Session:
    """Token and cookies shared by every call a ChatClient makes.

    `cookies` is the live jar of the HTTP client once a ChatClient has
    adopted the session, so responses update it in place.
    """
    token: Optional[str] = None
    cookies: httpx.Cookies = field(default_factory=httpx.Cookies)

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def by_host(self) -> Dict[str, List[Cookie]]:
        hosts: Dict[str, List[Cookie]] = {}
        for cookie in self.cookies.jar:
            hosts.setdefault(cookie.domain.lstrip("."), []).append(cookie)
        return hosts
