from __future__ import annotations

import json

import pytest

IDEA = {
    "email": "owner@example.com",
    "title": "Composting bins",
    "problem": "Food waste goes to landfill",
    "solution_hint": "Put compost bins next to the cafeteria",
}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("DELETE", "/api/admin/ideas/1"),
        ("GET", "/api/admin/ideas/1"),
        ("GET", "/api/admin/export"),
        ("GET", "/api/admin/products"),
        ("DELETE", "/api/admin/products/1"),
    ],
)
async def test_admin_routes_require_key(client, method, path):
    assert (await client.request(method, path)).status_code == 403
    wrong = await client.request(method, path, headers={"X-Admin-Key": "nope"})
    assert wrong.status_code == 403


@pytest.mark.asyncio
async def test_delete_idea_with_header_and_query_key(client, admin_headers, test_settings):
    first = (await client.post("/api/ideas", json=IDEA)).json()
    second = (await client.post("/api/ideas", json=IDEA)).json()

    resp = await client.delete(f"/api/admin/ideas/{first['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "deletedId": first["id"]}

    resp = await client.get(f"/api/admin/ideas/{second['id']}", params={"admin_key": test_settings.ADMIN_KEY})
    assert resp.json() == {"success": True, "deletedId": second["id"]}

    assert (await client.get("/api/ideas")).json() == []


@pytest.mark.asyncio
async def test_delete_idea_errors(client, admin_headers):
    assert (await client.delete("/api/admin/ideas/77", headers=admin_headers)).status_code == 404
    assert (await client.delete("/api/admin/ideas/x", headers=admin_headers)).status_code == 400


@pytest.mark.asyncio
async def test_vote_after_delete_is_not_found(client, admin_headers):
    idea = (await client.post("/api/ideas", json=IDEA)).json()
    await client.delete(f"/api/admin/ideas/{idea['id']}", headers=admin_headers)

    resp = await client.post(f"/api/ideas/{idea['id']}/vote", headers={"X-Voter-Token": "late"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_export_includes_email_as_attachment(client, admin_headers):
    a = (await client.post("/api/ideas", json=IDEA)).json()
    b = (await client.post("/api/ideas", json={**IDEA, "email": ""})).json()

    resp = await client.get("/api/admin/export", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="ideaboard-ideas-export-')
    assert disposition.endswith('.json"')

    rows = json.loads(resp.content)
    assert [r["id"] for r in rows] == [a["id"], b["id"]]
    assert rows[0]["email"] == "owner@example.com"
