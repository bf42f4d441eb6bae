"""FitTrack CLI — run the server, register, log in, check who you are.

Usage:
    fittrack serve                                  # Start the API (uvicorn)
    fittrack register alice_01 alice@example.com    # Create an account (prompts for password)
    fittrack login alice_01                         # Get a token (prompts for password)
    fittrack me --token <jwt>                       # Who does this token say I am?

The token can also come from FITTRACK_TOKEN.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("FITTRACK_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the FitTrack backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    return asyncio.run(coro)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(resp: httpx.Response) -> None:
    try:
        detail = resp.json().get("detail", resp.text)
    except ValueError:
        detail = resp.text
    click.secho(f"Error ({resp.status_code}): {detail}", fg="red", err=True)
    sys.exit(1)


async def _post(path: str, body: dict) -> httpx.Response:
    async with _client() as client:
        return await client.post(path, json=body)


async def _get(path: str, token: Optional[str]) -> httpx.Response:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    async with _client() as client:
        return await client.get(path, headers=headers)


def _print_auth(resp: httpx.Response, as_json: bool) -> None:
    if resp.status_code != 200:
        _fail(resp)
    data = resp.json()
    if as_json:
        click.echo(_pretty_json(data))
        return
    click.secho(f"Logged in as {data['username']} (id {data['userId']})", fg="green")
    click.echo(data["token"])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="fittrack")
def cli():
    """FitTrack command line."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: FITTRACK_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: FITTRACK_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the API server."""
    import uvicorn

    from fittrack.auth.errors import ConfigurationError
    from fittrack.auth.jwt import TokenCodec
    from fittrack.config import load_settings

    settings = load_settings()
    try:
        TokenCodec(settings)
    except ConfigurationError as e:
        click.secho(f"Configuration error: {e}", fg="red", err=True)
        sys.exit(2)

    uvicorn.run(
        "fittrack.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command()
@click.argument("username")
@click.argument("email")
@click.password_option()
@click.option("--json", "as_json", is_flag=True, help="Print the raw response")
def register(username: str, email: str, password: str, as_json: bool):
    """Create an account and print its token."""
    resp = _run(
        _post(
            "/auth/register",
            {"username": username, "email": email, "password": password},
        )
    )
    _print_auth(resp, as_json)


@cli.command()
@click.argument("email_or_username")
@click.option("--password", prompt=True, hide_input=True)
@click.option("--json", "as_json", is_flag=True, help="Print the raw response")
def login(email_or_username: str, password: str, as_json: bool):
    """Log in with email or username and print a token."""
    resp = _run(
        _post(
            "/auth/login",
            {"emailOrUsername": email_or_username, "password": password},
        )
    )
    _print_auth(resp, as_json)


@cli.command()
@click.option("--token", envvar="FITTRACK_TOKEN", help="Bearer token (or FITTRACK_TOKEN)")
def me(token: Optional[str]):
    """Show the identity behind a token."""
    if not token:
        click.secho("Error: --token required (or set FITTRACK_TOKEN)", fg="red", err=True)
        sys.exit(1)
    resp = _run(_get("/auth/me", token))
    if resp.status_code != 200:
        _fail(resp)
    click.echo(resp.json()["username"])


if __name__ == "__main__":
    cli()
