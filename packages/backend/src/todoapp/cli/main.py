"""todo CLI — manage your to-do list from the terminal.

Usage:
    todo register alice@example.com --name Alice   # Create account, save token
    todo login alice@example.com                   # Save a fresh token
    todo whoami                                    # Show the logged-in user
    todo list                                      # List tasks
    todo add "buy milk"                            # Create a task
    todo toggle <id>                               # Flip completed
    todo done <id>                                 # Mark completed
    todo rename <id> "buy oat milk"                # Change the title
    todo rm <id>                                   # Delete a task
    todo logout                                    # Forget the saved token

The saved token is passed explicitly to every request as an
Authorization header; the HTTP client itself carries no credentials.
Without a token the CLI talks to the API anonymously.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:5000"


def _api_url() -> str:
    return os.environ.get("TODOAPP_API_URL", DEFAULT_API_URL).rstrip("/")


def _token_path() -> Path:
    custom = os.environ.get("TODOAPP_TOKEN_FILE")
    if custom:
        return Path(custom)
    return Path.home() / ".todoapp" / "token"


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the todo backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Token storage
# ---------------------------------------------------------------------------


def load_token() -> Optional[str]:
    path = _token_path()
    if not path.exists():
        return None
    token = path.read_text().strip()
    return token or None


def save_token(token: str) -> None:
    path = _token_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(token)
    path.chmod(0o600)


def clear_token() -> bool:
    path = _token_path()
    if path.exists():
        path.unlink()
        return True
    return False


def auth_headers(token: Optional[str]) -> dict[str, str]:
    """Per-request credentials. Empty when logged out."""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _check(r: httpx.Response) -> dict | list:
    """Return the JSON body, or print the API's error and exit."""
    if r.status_code >= 400:
        try:
            detail = r.json().get("detail", r.text)
        except (ValueError, AttributeError):
            detail = r.text
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        _fail(f"{detail} (HTTP {r.status_code})")
    return r.json()


def _print_task(task: dict) -> None:
    mark = click.style("[x]", fg="green") if task["completed"] else "[ ]"
    owner = "" if task.get("owner_id") else click.style("  (unowned)", fg="yellow")
    click.echo(f"{mark} {task['id']}  {task['title']}{owner}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="todo")
def main():
    """todo — personal to-do lists backed by the todoapp API."""


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--name", "-n", required=True, help="Display name")
@click.password_option()
def register(email: str, name: str, password: str):
    """Create an account and save its token."""
    _run(_register_impl(email, name, password))


async def _register_impl(email: str, name: str, password: str):
    async with _client() as c:
        r = await c.post("/api/register", json={
            "email": email,
            "password": password,
            "name": name,
        })
        body = _check(r)
    save_token(body["token"])
    click.secho(f"Registered {body['user']['email']} ({body['user']['name']})", fg="green")


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and save a fresh token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/login", json={"email": email, "password": password})
        body = _check(r)
    save_token(body["token"])
    click.secho(f"Logged in as {body['user']['email']}", fg="green")


@main.command()
def logout():
    """Forget the saved token."""
    if clear_token():
        click.echo("Logged out.")
    else:
        click.echo("Not logged in.")


@main.command()
def whoami():
    """Show the user the saved token belongs to."""
    token = load_token()
    if not token:
        _fail("not logged in")
    _run(_whoami_impl(token))


async def _whoami_impl(token: str):
    async with _client() as c:
        r = await c.get("/api/me", headers=auth_headers(token))
        user = _check(r)
    click.echo(f"{user['name']} <{user['email']}>  id={user['id']}")


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@main.command(name="list")
def list_cmd():
    """List tasks (yours when logged in, everything otherwise)."""
    _run(_list_impl(load_token()))


async def _list_impl(token: Optional[str]):
    async with _client() as c:
        r = await c.get("/api/todos", headers=auth_headers(token))
        tasks = _check(r)

    if not tasks:
        click.echo("No tasks yet.")
        return
    remaining = sum(1 for t in tasks if not t["completed"])
    click.secho(f"Tasks ({remaining} of {len(tasks)} remaining):", bold=True)
    for task in tasks:
        _print_task(task)


@main.command()
@click.argument("title")
def add(title: str):
    """Create a task."""
    _run(_add_impl(load_token(), title))


async def _add_impl(token: Optional[str], title: str):
    async with _client() as c:
        r = await c.post(
            "/api/todos",
            json={"title": title, "completed": False},
            headers=auth_headers(token),
        )
        task = _check(r)
    click.echo("Created:")
    _print_task(task)


async def _update(token: Optional[str], task_id: str, changes: dict) -> dict:
    async with _client() as c:
        r = await c.put(f"/api/todos/{task_id}", json=changes, headers=auth_headers(token))
        return _check(r)


@main.command()
@click.argument("task_id")
def toggle(task_id: str):
    """Flip a task between done and not done."""
    _run(_toggle_impl(load_token(), task_id))


async def _toggle_impl(token: Optional[str], task_id: str):
    async with _client() as c:
        r = await c.get("/api/todos", headers=auth_headers(token))
        current = next((t for t in _check(r) if t["id"] == task_id), None)
        if current is None and token:
            # Logged-in listings hide unowned tasks, which are still writable.
            r = await c.get("/api/todos")
            current = next((t for t in _check(r) if t["id"] == task_id), None)
    if current is None:
        _fail(f"task {task_id} not found")
    task = await _update(token, task_id, {"completed": not current["completed"]})
    _print_task(task)


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Mark a task as completed."""
    task = _run(_update(load_token(), task_id, {"completed": True}))
    _print_task(task)


@main.command()
@click.argument("task_id")
@click.argument("title")
def rename(task_id: str, title: str):
    """Change a task's title."""
    task = _run(_update(load_token(), task_id, {"title": title}))
    _print_task(task)


@main.command()
@click.argument("task_id")
def rm(task_id: str):
    """Delete a task."""
    _run(_rm_impl(load_token(), task_id))


async def _rm_impl(token: Optional[str], task_id: str):
    async with _client() as c:
        r = await c.delete(f"/api/todos/{task_id}", headers=auth_headers(token))
        body = _check(r)
    click.echo(body["message"])


if __name__ == "__main__":
    main()
