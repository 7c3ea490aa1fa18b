from __future__ import annotations
import re
from datetime import datetime
from typing import Optional

# ========================================
#           LOGIN PAGE HELPERS
# ========================================
"""
The chat service embeds its session token somewhere in the HTML of the
landing page. Nothing marks it, so the first run of 32 alphanumerics wins.
"""

_TOKEN_RE = re.compile(r'[a-zA-Z0-9]{32}')
_COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')

def find_token(body: str) -> Optional[str]:
    """
    Return the first 32-character alphanumeric run in body, or None.
    """
    match = _TOKEN_RE.search(body)
    return match.group() if match else None

def is_hex_color(s: str) -> bool:
    """
    Accepts '#RRGGBB', the only colour form the profile field takes.
    """
    return bool(_COLOR_RE.fullmatch(s))


# ========================================
#           REQUEST PARAMETER HELPERS
# ========================================

def timestamp_num(now: Optional[datetime] = None) -> str:
    """
    Local wall-clock time as YYYYMMDDHHMMSS.

    fetchData requires it in its `num` field. What the server does with it
    is not known, so it is sent as-is and never interpreted here.
    """
    now = now or datetime.now()
    return now.strftime("%Y%m%d%H%M%S")

def is_blank(s: Optional[str]) -> bool:
    return s is None or s == ""
