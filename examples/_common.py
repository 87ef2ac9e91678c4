"""
Shared helpers for todoapp examples.

Handles the health check and account setup so each example can focus
on its specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:5000/api"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  todoapp-server   (or: uvicorn todoapp.main:app --port 5000)")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")


def create_account(name: str) -> tuple[str, dict]:
    """Register a fresh user, returning (token, user).

    Uses a unique email per run so examples are repeatable.
    """
    run_id = uuid.uuid4().hex[:8]
    resp = httpx.post(
        f"{BASE}/register",
        json={
            "email": f"{name.lower()}-{run_id}@example.com",
            "password": "demo-password",
            "name": name,
        },
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    body = resp.json()
    return body["token"], body["user"]


def bearer(token: str) -> dict:
    """Per-request credentials for httpx calls."""
    return {"Authorization": f"Bearer {token}"}
