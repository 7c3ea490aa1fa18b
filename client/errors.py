from __future__ import annotations


class ChatClientError(Exception):
    """Local failure detected before any request is sent."""
    pass


class MissingRoomHashError(ChatClientError):
    """Raised when no room hash was given."""

    def __init__(self) -> None:
        super().__init__("ハッシュIDが設定されていません")


class MissingTokenError(ChatClientError):
    """Raised when the session has no token yet."""

    def __init__(self) -> None:
        super().__init__("Tokenが空です")


def as_result(error: Exception) -> str:
    """Render an error the way operation results report them."""
    return f"Error: {error}"
