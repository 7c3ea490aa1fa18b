from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import json


@dataclass
class ChatMessage:
    """
    One entry of the `data_list` object the room endpoint returns for fetchData:

    {
    "data_list": {
        "<opaque key>": {"data": {"msg": "STRING", "name": "STRING", ...}, ...},
        ...
    }
    }

    Only `msg` and `name` are read; everything else in the entry is ignored.
    """
    author: Optional[str]
    text: Optional[str]
    # data_list key; unique per message within a room
    key: Optional[str] = None

    def display(self) -> str:
        return f"{self.author or ''}: {self.text}"

    @classmethod
    def from_entry(cls, entry: Any, key: Optional[str] = None) -> Optional["ChatMessage"]:
        """Build a message from one data_list value, or None if it has no msg."""
        if not isinstance(entry, dict):
            return None
        data = entry.get("data")
        if not isinstance(data, dict):
            return None
        text = _opt_string(data, "msg")
        if text is None:
            return None
        return cls(author=_opt_string(data, "name"), text=text, key=key)


def _opt_string(obj: Dict[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_data_list(payload: Any) -> List[ChatMessage]:
    """
    Pull messages out of a decoded fetchData response.

    Entries come back in whatever order the server put the keys in;
    nothing here sorts them.
    """
    if not isinstance(payload, dict):
        return []
    data_list = payload.get("data_list")
    if not isinstance(data_list, dict):
        return []

    messages = []
    for key, entry in data_list.items():
        message = ChatMessage.from_entry(entry, key=key)
        if message is not None:
            messages.append(message)
    return messages


def build_chat_data(text: str) -> str:
    """
    The `data` form field of a sendData post.

    `text` goes in unescaped, so quotes or control characters in it yield
    malformed JSON. The server's expected encoding for those is unknown.
    """
    return '{"type":"chat","msg":"' + text + '"}'
