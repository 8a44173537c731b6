"""Seed script for development data.

Run with:  pto-tracker-seed   (or  python -m pto_tracker.seed)
Populates a running API over HTTP; safe to re-run, existing rows are skipped.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import httpx

BASE_URL = "http://localhost:8000"
# Dev auth does not check that the actor exists, so bootstrap as a fixed admin id.
BOOTSTRAP_ACTOR_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": BOOTSTRAP_ACTOR_ID,
    "X-Role": "ADMIN",
}

USERS = [
    {"name": "Admin User", "email": "admin@example.com", "password": "admin123", "role": "ADMIN"},
    {"name": "Manny Manager", "email": "manager@example.com", "password": "manager123", "role": "MANAGER"},
    {"name": "Eden Employee", "email": "employee@example.com", "password": "employee123", "role": "EMPLOYEE"},
]

TEAM = {"name": "Engineering", "description": "Builds product"}

POLICY = {
    "name": "US-Standard",
    "accrual_hrs_per_month": 6.67,
    "carryover_max": 40,
    "effective_on": "2025-01-01",
}

BALANCE_YEAR = 2025
BALANCE = {"accrued": 40, "used": 8, "carryover": 12}


async def _safe_post(client: httpx.AsyncClient, path: str, json: dict[str, Any], label: str) -> dict | None:
    """POST with 409-conflict tolerance for idempotency."""
    resp = await client.post(f"{BASE_URL}{path}", json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def _list_items(client: httpx.AsyncClient, path: str, **params: Any) -> list[dict]:
    resp = await client.get(f"{BASE_URL}{path}", headers=HEADERS, params={"limit": 100, **params})
    if resp.status_code != 200:
        return []
    return resp.json().get("items", [])


async def seed_users(client: httpx.AsyncClient) -> dict[str, str]:
    """Seed users and return an email->id mapping."""
    print("\n--- Seeding users ---")
    user_ids: dict[str, str] = {}
    for user in USERS:
        result = await _safe_post(client, "/users", user, f"User: {user['email']} ({user['role']})")
        if result:
            user_ids[user["email"]] = result["id"]

    if len(user_ids) < len(USERS):
        for item in await _list_items(client, "/users"):
            user_ids.setdefault(item["email"], item["id"])
    return user_ids


async def _find_employee_id(client: httpx.AsyncClient, user_id: str) -> str | None:
    for item in await _list_items(client, "/employees"):
        if item["user_id"] == user_id:
            return item["id"]
    return None


async def seed_people(client: httpx.AsyncClient, user_ids: dict[str, str]) -> str | None:
    """Seed the manager's profile, the team and the employee; return the employee's profile id."""
    print("\n--- Seeding team and employees ---")
    manager_id = user_ids.get("manager@example.com")
    employee_user_id = user_ids.get("employee@example.com")
    if not manager_id or not employee_user_id:
        print("  [SKIP] manager or employee user missing")
        return None

    await _safe_post(
        client,
        "/employees",
        {"user_id": manager_id, "title": "Engineering Manager", "department": "Engineering"},
        "Profile: Manny Manager",
    )

    team = await _safe_post(client, "/teams", {**TEAM, "manager_id": manager_id}, f"Team: {TEAM['name']}")
    team_id = team["id"] if team else None
    if team_id is None:
        for item in await _list_items(client, "/teams"):
            if item["name"] == TEAM["name"]:
                team_id = item["id"]

    profile = await _safe_post(
        client,
        "/employees",
        {
            "user_id": employee_user_id,
            "title": "Frontend Dev",
            "department": "Engineering",
            "manager_id": manager_id,
            "team_id": team_id,
        },
        "Profile: Eden Employee",
    )
    if profile:
        return profile["id"]
    return await _find_employee_id(client, employee_user_id)


async def seed_policy(client: httpx.AsyncClient) -> str | None:
    print("\n--- Seeding policy ---")
    result = await _safe_post(client, "/policies", POLICY, f"Policy: {POLICY['name']}")
    if result:
        return result["id"]
    for item in await _list_items(client, "/policies"):
        if item["name"] == POLICY["name"]:
            return item["id"]
    return None


async def seed_balance(client: httpx.AsyncClient, employee_id: str, policy_id: str) -> None:
    print("\n--- Seeding balance ---")
    await _safe_post(
        client,
        "/balances",
        {"employee_id": employee_id, "policy_id": policy_id, "year": BALANCE_YEAR, **BALANCE},
        f"Balance: Eden Employee {BALANCE_YEAR}",
    )


async def run() -> None:
    print("=" * 60)
    print("  PTO Tracker - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (uvicorn pto_tracker.main:app)")
            sys.exit(1)

        user_ids = await seed_users(client)
        employee_id = await seed_people(client, user_ids)
        policy_id = await seed_policy(client)
        if employee_id and policy_id:
            await seed_balance(client, employee_id, policy_id)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
