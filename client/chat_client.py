from __future__ import annotations
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import httpx

from shared.log import get_logger
from shared.utils import find_token, is_blank, timestamp_num
from .config import API_PATH, LOGIN_PATH, ROOM_PATH, ChatConfig
from .errors import ChatClientError, MissingRoomHashError, MissingTokenError, as_result
from .messages import ChatMessage, build_chat_data, parse_data_list
from .state import Session

logger = get_logger(__name__)


class ChatClient:
    """
    Client for the anonymous chat service.

    Every operation sends at most one request and always returns a value:
    failures come back as None, an empty list, or an "Error: ..." string
    rather than as exceptions. Operations needing a token refuse to send
    anything until login() has found one.
    """

    def __init__(
        self,
        config: Optional[ChatConfig] = None,
        session: Optional[Session] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or ChatConfig()
        self.session = session or Session()
        self._clock = clock

        options: Dict[str, Any] = {}
        if self.config.timeout is not None:
            options["timeout"] = self.config.timeout
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            cookies=self.session.cookies,
            transport=transport,
            event_hooks={"response": [self._log_response]},
            **options,
        )
        # httpx copies the jar it is given; share the live one instead
        self.session.cookies = self._http.cookies

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    async def _log_response(self, response: httpx.Response) -> None:
        request = response.request
        logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)

    def _require_token(self) -> str:
        if not self.session.has_token:
            raise MissingTokenError()
        return self.session.token

    @staticmethod
    def _require_hash(room_hash: Optional[str]) -> str:
        if is_blank(room_hash):
            raise MissingRoomHashError()
        return room_hash

    # ========================================
    #           OPERATIONS
    # ========================================

    async def login(self) -> Optional[str]:
        """
        Scrape a session token from the landing page.

        Returns the session token afterwards. When the page has no token or
        the request fails, the previous token (possibly None) is returned
        unchanged, so a caller cannot tell those cases from a repeat login.
        """
        try:
            response = await self._http.get(LOGIN_PATH)
        except httpx.HTTPError as e:
            logger.warning("Login request failed: %s", e)
            return self.session.token

        token = find_token(response.text)
        if token is None:
            logger.warning("No token found on login page", extra={"status_code": response.status_code})
            return self.session.token

        self.session.token = token
        logger.info("Login succeeded")
        logger.debug("Token: %s", token)
        return token

    async def create_room(self) -> Optional[Dict[str, Any]]:
        """Create a room and return the server's JSON object, or None."""
        try:
            token = self._require_token()
        except ChatClientError as e:
            logger.warning("createRoom skipped: %s", e)
            return None

        form = {
            "action": "createRoom",
            "csrf_token_check": token,
        }
        try:
            response = await self._http.post(API_PATH, data=form)
        except httpx.HTTPError as e:
            logger.warning("createRoom request failed: %s", e)
            return None

        if not response.content:
            logger.warning("createRoom returned an empty body", extra={"status_code": response.status_code})
            return None
        try:
            payload = response.json()
        except (ValueError, RecursionError) as e:
            logger.warning("createRoom returned non-JSON body: %s", e)
            return None
        if not isinstance(payload, dict):
            logger.warning("createRoom returned %s, expected an object", type(payload).__name__)
            return None
        return payload

    async def send_room(self, text: str, room_hash: Optional[str]) -> str:
        """
        Post `text` to a room.

        Returns the raw response body on success, otherwise a string
        starting with "Error: ".
        """
        try:
            room_hash = self._require_hash(room_hash)
            logger.debug("Token: %s", self.session.token)
            logger.debug("Target hash: %s", room_hash)
            token = self._require_token()
        except ChatClientError as e:
            logger.warning("sendData skipped: %s", e)
            return as_result(e)

        form = {
            "action": "sendData",
            "hash": room_hash,
            "profile_name": self.config.profile_name,
            "profile_color": self.config.profile_color,
            "data": build_chat_data(text),
            "csrf_token_check": token,
        }
        context = {"room": room_hash, "action": "sendData"}
        try:
            response = await self._http.post(ROOM_PATH, data=form, headers=self.config.browser_headers())
        except httpx.HTTPError as e:
            logger.error("Send failed: %s", e, extra=context)
            return f"Error: ネットワークエラー - {e}"

        if not response.is_success:
            logger.error("Send rejected", extra={**context, "status_code": response.status_code})
            return f"Error: サーバーエラー - HTTP {response.status_code}"

        logger.debug("Response: %s", response.text, extra=context)
        return response.text

    async def fetch_messages(self, room_hash: Optional[str]) -> List[ChatMessage]:
        """Recent messages of a room, in server order; [] on any failure."""
        if is_blank(room_hash):
            return []
        try:
            token = self._require_token()
        except ChatClientError as e:
            logger.warning("fetchData skipped: %s", e)
            return []

        form = {
            "action": "fetchData",
            "hash": room_hash,
            "csrf_token_check": token,
            "mode": "log",
            "type": "last",
            "num": timestamp_num(self._clock()),
        }
        context = {"room": room_hash, "action": "fetchData"}
        try:
            response = await self._http.post(ROOM_PATH, data=form)
            payload = response.json()
        except httpx.HTTPError as e:
            logger.warning("Fetch failed: %s", e, extra=context)
            return []
        except (ValueError, RecursionError) as e:
            logger.warning("Fetch returned unparseable body: %s", e, extra=context)
            return []

        return parse_data_list(payload)

    async def fetch_room(self, room_hash: Optional[str]) -> List[str]:
        """Recent messages of a room rendered as "<author>: <message>"."""
        return [message.display() for message in await self.fetch_messages(room_hash)]
