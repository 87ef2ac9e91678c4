#!/usr/bin/env python3
"""
todoapp Quickstart — ownership rules in one script.

Registers two users, creates owned and anonymous tasks, and shows what
each caller can see and change.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:5000
"""

import httpx

from _common import BASE, bearer, check_backend, create_account


def main():
    check_backend()
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Accounts ──────────────────────────────────────────────────
    print("\n1. Registering Alice and Bob...")
    alice_token, alice = create_account("Alice")
    bob_token, bob = create_account("Bob")
    print(f"   Alice: {alice['email']} ({alice['id'][:8]}...)")
    print(f"   Bob:   {bob['email']} ({bob['id'][:8]}...)")

    # ── Tasks ─────────────────────────────────────────────────────
    print("\n2. Creating tasks...")
    resp = client.post("/todos", json={"title": "buy milk"}, headers=bearer(alice_token))
    assert resp.status_code == 201, f"Failed: {resp.text}"
    milk = resp.json()
    print(f"   Alice's task: {milk['title']} (owner {milk['owner_id'][:8]}...)")

    resp = client.post("/todos", json={"title": "water the plants"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    plants = resp.json()
    print(f"   Anonymous task: {plants['title']} (owner {plants['owner_id']})")

    # ── Listing ───────────────────────────────────────────────────
    print("\n3. Listing...")
    mine = client.get("/todos", headers=bearer(alice_token)).json()
    everything = client.get("/todos").json()
    print(f"   Alice sees {len(mine)} task(s); anonymous callers see {len(everything)}")

    # ── Ownership ─────────────────────────────────────────────────
    print("\n4. Bob tries to delete Alice's task...")
    resp = client.delete(f"/todos/{milk['id']}", headers=bearer(bob_token))
    print(f"   → {resp.status_code} {resp.json()['detail']}")

    print("\n5. Bob completes the anonymous task (unowned tasks are shared)...")
    resp = client.put(f"/todos/{plants['id']}", json={"completed": True}, headers=bearer(bob_token))
    print(f"   → {resp.status_code} completed={resp.json()['completed']}")

    print("\n6. Alice deletes her task...")
    resp = client.delete(f"/todos/{milk['id']}", headers=bearer(alice_token))
    print(f"   → {resp.status_code} {resp.json()['message']}")

    client.delete(f"/todos/{plants['id']}")
    print("\nDone.")


if __name__ == "__main__":
    main()
