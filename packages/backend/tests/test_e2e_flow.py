"""Full-flow E2E integration test — the complete register → todo lifecycle.

Learn: This walks the whole API the way a client would: register, create
a task with a token, see it in the personal and the anonymous listing,
fail to delete it as someone else, then delete it as the owner.
"""

import pytest


@pytest.mark.asyncio
async def test_full_lifecycle_via_api(client):
    # ── Step 1: Register ───────────────────────────────────
    r = await client.post(
        "/api/register",
        json={"email": "alice@example.com", "password": "pw123", "name": "Alice"},
    )
    assert r.status_code == 201
    t1 = r.json()["token"]
    alice_id = r.json()["user"]["id"]
    alice_headers = {"Authorization": f"Bearer {t1}"}

    # Some pre-existing anonymous data
    r = await client.post("/api/todos", json={"title": "legacy chore"})
    assert r.status_code == 201

    # ── Step 2: Create a task with the token ───────────────
    r = await client.post("/api/todos", json={"title": "buy milk"}, headers=alice_headers)
    assert r.status_code == 201
    task = r.json()
    assert task["owner_id"] == alice_id
    assert task["completed"] is False

    # ── Step 3: Personal listing has only Alice's task ─────
    r = await client.get("/api/todos", headers=alice_headers)
    assert r.status_code == 200
    assert [t["id"] for t in r.json()] == [task["id"]]

    # ── Step 4: Anonymous listing has everything ───────────
    r = await client.get("/api/todos")
    assert r.status_code == 200
    ids = [t["id"] for t in r.json()]
    assert task["id"] in ids
    assert len(ids) == 2

    # ── Step 5: Another user can't delete it ───────────────
    r = await client.post(
        "/api/register",
        json={"email": "mallory@example.com", "password": "pw456", "name": "Mallory"},
    )
    mallory_headers = {"Authorization": f"Bearer {r.json()['token']}"}
    r = await client.delete(f"/api/todos/{task['id']}", headers=mallory_headers)
    assert r.status_code == 404

    # ── Step 6: Login again and toggle it ──────────────────
    r = await client.post(
        "/api/login",
        json={"email": "alice@example.com", "password": "pw123"},
    )
    assert r.status_code == 200
    t2 = r.json()["token"]
    r = await client.put(
        f"/api/todos/{task['id']}",
        json={"completed": True},
        headers={"Authorization": f"Bearer {t2}"},
    )
    assert r.status_code == 200
    assert r.json()["completed"] is True
    assert r.json()["title"] == "buy milk"

    # ── Step 7: Owner deletes it ───────────────────────────
    r = await client.delete(f"/api/todos/{task['id']}", headers=alice_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Todo deleted successfully"

    r = await client.get("/api/todos", headers=alice_headers)
    assert r.json() == []
