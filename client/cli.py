#!/usr/bin/env python3

from __future__ import annotations
import asyncio
from typing import Optional, Set

import typer
from aioconsole import ainput
from rich.console import Console
from rich.markup import escape

from shared.log import get_logger, set_level
from .chat_client import ChatClient
from .config import ChatConfig

app = typer.Typer(help="kukuchat: anonymous chat room client")
console = Console()
logger = get_logger(__name__)


def _load_config(base_url: Optional[str], name: Optional[str]) -> ChatConfig:
    config = ChatConfig.from_env()
    if base_url:
        config.base_url = base_url.rstrip("/")
    if name:
        config.profile_name = name
    config.validate()
    return config


async def _logged_in(config: ChatConfig) -> Optional[ChatClient]:
    chat = ChatClient(config)
    if not await chat.login():
        console.print("[red]Login failed: no token on the landing page[/]")
        await chat.aclose()
        return None
    return chat


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    set_level("DEBUG" if verbose else "WARNING")


@app.command()
def login(
    base_url: Optional[str] = typer.Option(None, help="Chat service URL"),
):
    """Log in and print the session token."""

    async def run() -> Optional[str]:
        async with ChatClient(_load_config(base_url, None)) as chat:
            return await chat.login()

    token = asyncio.run(run())
    if not token:
        console.print("[red]No token found[/]")
        raise typer.Exit(code=1)
    console.print(token)


@app.command("create-room")
def create_room(
    base_url: Optional[str] = typer.Option(None, help="Chat service URL"),
):
    """Create a new room and print the server's reply."""

    async def run():
        chat = await _logged_in(_load_config(base_url, None))
        if chat is None:
            return None
        async with chat:
            return await chat.create_room()

    room = asyncio.run(run())
    if room is None:
        console.print("[red]Room creation failed[/]")
        raise typer.Exit(code=1)
    console.print_json(data=room, ensure_ascii=False)


@app.command()
def send(
    room_hash: str = typer.Argument(..., help="Room hash"),
    text: str = typer.Argument(..., help="Message to post"),
    name: Optional[str] = typer.Option(None, help="Display name"),
    base_url: Optional[str] = typer.Option(None, help="Chat service URL"),
):
    """Post one message to a room."""

    async def run() -> Optional[str]:
        chat = await _logged_in(_load_config(base_url, name))
        if chat is None:
            return None
        async with chat:
            return await chat.send_room(text, room_hash)

    result = asyncio.run(run())
    if result is None:
        raise typer.Exit(code=1)
    if result.startswith("Error:"):
        console.print(f"[red]{escape(result)}[/]")
        raise typer.Exit(code=1)
    console.print(result, markup=False)


@app.command()
def fetch(
    room_hash: str = typer.Argument(..., help="Room hash"),
    base_url: Optional[str] = typer.Option(None, help="Chat service URL"),
):
    """Print the recent messages of a room."""

    async def run():
        chat = await _logged_in(_load_config(base_url, None))
        if chat is None:
            return None
        async with chat:
            return await chat.fetch_room(room_hash)

    lines = asyncio.run(run())
    if lines is None:
        raise typer.Exit(code=1)
    if not lines:
        console.print("[dim]No messages[/]")
    for line in lines:
        console.print(line, markup=False)


@app.command()
def chat(
    room_hash: str = typer.Argument(..., help="Room hash"),
    name: Optional[str] = typer.Option(None, help="Display name"),
    interval: float = typer.Option(3.0, help="Seconds between polls"),
    base_url: Optional[str] = typer.Option(None, help="Chat service URL"),
):
    """Join a room interactively: type to send, new messages are polled."""
    config = _load_config(base_url, name)

    async def main_loop() -> None:
        session = await _logged_in(config)
        if session is None:
            raise typer.Exit(code=1)
        console.print(f"[bold green]Joined[/] {room_hash} as {config.profile_name}")

        async def poll_loop() -> None:
            # keys of the last non-empty poll; an empty poll may be a failed fetch
            seen: Set[str] = set()
            while True:
                messages = await session.fetch_messages(room_hash)
                for message in messages:
                    if message.key not in seen:
                        console.print(message.display(), markup=False)
                if messages:
                    seen = {message.key for message in messages}
                await asyncio.sleep(interval)

        poll_task = asyncio.create_task(poll_loop())
        try:
            while True:
                line = (await ainput(": ")).strip()
                if not line:
                    continue
                if line in {"/quit", "/exit"}:
                    break
                if line == "/help":
                    console.print("Type a message to send it. /quit to leave.")
                    continue
                result = await session.send_room(line, room_hash)
                if result.startswith("Error:"):
                    console.print(f"[red]{escape(result)}[/]")
        except EOFError:
            pass
        finally:
            poll_task.cancel()
            await session.aclose()

    asyncio.run(main_loop())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
