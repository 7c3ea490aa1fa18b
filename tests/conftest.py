import os
import tempfile
from typing import Callable, Dict, List, Tuple, Union
from urllib.parse import parse_qsl

import httpx
import pytest

# Keep test runs from writing logs/ into the working tree
os.environ.setdefault("KUKU_LOG_DIR", os.path.join(tempfile.gettempdir(), "kukuchat-test-logs"))

TOKEN = "3f9aB0c1D2e3F4a5B6c7D8e9F0a1B2c3"
LOGIN_PAGE = f'<html><head><script>var csrf_token = "{TOKEN}";</script></head><body></body></html>'

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeChatServer:
    """Records requests and answers them from a (method, path) routing table."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Route] = {}

    def on(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return route

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def form(self, index: int = -1) -> Dict[str, str]:
        return dict(parse_qsl(self.requests[index].content.decode("utf-8"), keep_blank_values=True))


@pytest.fixture
def server() -> FakeChatServer:
    fake = FakeChatServer()
    fake.on("GET", "/", httpx.Response(200, text=LOGIN_PAGE))
    return fake


@pytest.fixture
def make_client(server):
    from client.chat_client import ChatClient

    def factory(**kwargs) -> ChatClient:
        return ChatClient(transport=server.transport(), **kwargs)

    return factory


@pytest.fixture
def token() -> str:
    return TOKEN
