import httpx
import pytest

from client.config import ChatConfig


@pytest.mark.asyncio
async def test_send_room_without_hash_is_rejected_locally(server, make_client):
    async with make_client() as chat:
        await chat.login()
        result = await chat.send_room("hello", None)

    assert result == "Error: ハッシュIDが設定されていません"
    assert [r.method for r in server.requests] == ["GET"]


@pytest.mark.asyncio
async def test_send_room_without_token_is_rejected_locally(server, make_client):
    async with make_client() as chat:
        result = await chat.send_room("hello", "r00mhash")

    assert result == "Error: Tokenが空です"
    assert server.requests == []


@pytest.mark.asyncio
async def test_send_room_checks_hash_before_token(server, make_client):
    async with make_client() as chat:
        assert await chat.send_room("hello", "") == "Error: ハッシュIDが設定されていません"


@pytest.mark.asyncio
async def test_send_room_posts_form_and_browser_headers(server, make_client, token):
    server.on("POST", "/room.php", httpx.Response(200, text='{"result":"OK"}'))

    async with make_client() as chat:
        await chat.login()
        result = await chat.send_room("こんにちは", "r00mhash")

    assert result == '{"result":"OK"}'
    assert server.form() == {
        "action": "sendData",
        "hash": "r00mhash",
        "profile_name": "匿名とむ",
        "profile_color": "#000000",
        "data": '{"type":"chat","msg":"こんにちは"}',
        "csrf_token_check": token,
    }
    headers = server.requests[-1].headers
    assert headers["Content-Type"] == "application/x-www-form-urlencoded; charset=UTF-8"
    assert headers["Origin"] == "https://c.kuku.lu"
    assert headers["Referer"] == "https://c.kuku.lu/"
    assert headers["X-Requested-With"] == "XMLHttpRequest"
    assert headers["User-Agent"].startswith("Mozilla/5.0")


@pytest.mark.asyncio
async def test_send_room_uses_configured_profile(server, make_client):
    server.on("POST", "/room.php", httpx.Response(200, text="ok"))
    config = ChatConfig(profile_name="tester", profile_color="#ff0000")

    async with make_client(config=config) as chat:
        await chat.login()
        await chat.send_room("hi", "r00mhash")

    form = server.form()
    assert form["profile_name"] == "tester"
    assert form["profile_color"] == "#ff0000"


@pytest.mark.asyncio
async def test_send_room_does_not_escape_text(server, make_client):
    server.on("POST", "/room.php", httpx.Response(200, text="ok"))

    async with make_client() as chat:
        await chat.login()
        await chat.send_room('say "hi"', "r00mhash")

    assert server.form()["data"] == '{"type":"chat","msg":"say "hi""}'


@pytest.mark.asyncio
async def test_send_room_reports_http_status(server, make_client):
    server.on("POST", "/room.php", httpx.Response(500, text="boom"))

    async with make_client() as chat:
        await chat.login()
        result = await chat.send_room("hello", "r00mhash")

    assert result.startswith("Error:")
    assert "500" in result
    assert result == "Error: サーバーエラー - HTTP 500"


@pytest.mark.asyncio
async def test_send_room_reports_transport_cause(server, make_client):
    def fail(request):
        raise httpx.ConnectError("name resolution failed", request=request)

    server.on("POST", "/room.php", fail)

    async with make_client() as chat:
        await chat.login()
        result = await chat.send_room("hello", "r00mhash")

    assert result == "Error: ネットワークエラー - name resolution failed"


@pytest.mark.asyncio
async def test_send_room_returns_empty_body_verbatim(server, make_client):
    server.on("POST", "/room.php", httpx.Response(200, text=""))

    async with make_client() as chat:
        await chat.login()
        assert await chat.send_room("hello", "r00mhash") == ""
