import pytest
from httpx import AsyncClient


def member_url(seeded, user_key: str, field: str, slug: str = "acme") -> str:
    return f"/tenants/{slug}/members/{seeded['users'][user_key]['id']}/{field}"


@pytest.mark.asyncio
async def test_admin_changes_member_role(client: AsyncClient, auth_headers, seeded):
    response = await client.patch(
        member_url(seeded, "member", "role"),
        json={"role": "moderator"},
        headers=auth_headers("admin"),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "MODERATOR"
    assert data["status"] == "ACTIVE"

    # The promoted member now reaches the admin area
    decision = await client.post(
        "/access/authorize",
        json={"path": "/c/acme/admin"},
        headers=auth_headers("member"),
    )
    assert decision.json()["kind"] == "GRANT"


@pytest.mark.asyncio
async def test_role_change_accepts_legacy_tokens(client: AsyncClient, auth_headers, seeded):
    response = await client.patch(
        member_url(seeded, "member", "role"),
        json={"role": "supervisor"},
        headers=auth_headers("owner"),
    )

    assert response.json()["role"] == "MODERATOR"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "actor,target,role,status_code,code",
    [
        ("admin", "member", "wizard", 400, "INVALID_ROLE"),
        ("member", "pending", "member", 403, "INSUFFICIENT_ROLE"),
        ("admin", "owner", "member", 403, "INSUFFICIENT_ROLE"),
        ("admin", "member", "owner", 403, "INSUFFICIENT_ROLE"),
        ("outsider", "member", "admin", 403, "NOT_A_MEMBER"),
        ("suspended", "member", "admin", 403, "NOT_A_MEMBER"),
        ("owner", "outsider", "admin", 404, "MEMBERSHIP_NOT_FOUND"),
        ("owner", "owner", "admin", 409, "CANNOT_REMOVE_LAST_OWNER"),
    ],
)
async def test_role_change_rejections(
    client: AsyncClient, auth_headers, seeded, actor, target, role, status_code, code
):
    response = await client.patch(
        member_url(seeded, target, "role"),
        json={"role": role},
        headers=auth_headers(actor),
    )

    assert response.status_code == status_code
    assert response.json()["error"]["code"] == code


@pytest.mark.asyncio
async def test_invalid_user_id(client: AsyncClient, auth_headers):
    response = await client.patch(
        "/tenants/acme/members/not-a-uuid/role",
        json={"role": "member"},
        headers=auth_headers("owner"),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_USER_ID"


@pytest.mark.asyncio
async def test_moderator_approves_pending_member(client: AsyncClient, auth_headers, seeded):
    response = await client.patch(
        member_url(seeded, "pending", "status"),
        json={"status": "active"},
        headers=auth_headers("supervisor"),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "ACTIVE"

    decision = await client.post(
        "/access/authorize",
        json={"path": "/c/acme/app"},
        headers=auth_headers("pending"),
    )
    assert decision.json()["kind"] == "GRANT"


@pytest.mark.asyncio
async def test_banned_member_loses_access(client: AsyncClient, auth_headers, seeded):
    headers = auth_headers("member")
    first = await client.post("/access/authorize", json={"path": "/c/acme/events"}, headers=headers)
    assert first.json()["kind"] == "GRANT"

    response = await client.patch(
        member_url(seeded, "member", "status"),
        json={"status": "banned"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200

    second = await client.post("/access/authorize", json={"path": "/c/acme/events"}, headers=headers)
    assert second.json()["kind"] == "REDIRECT"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "actor,target,status_value,status_code,code",
    [
        ("admin", "member", "inactive", 400, "INVALID_STATUS"),
        ("member", "pending", "active", 403, "INSUFFICIENT_ROLE"),
        ("supervisor", "admin", "suspended", 403, "INSUFFICIENT_ROLE"),
        ("admin", "admin", "suspended", 403, "INSUFFICIENT_ROLE"),
        ("owner", "owner", "banned", 403, "INSUFFICIENT_ROLE"),
        ("root", "owner", "banned", 409, "CANNOT_REMOVE_LAST_OWNER"),
    ],
)
async def test_status_change_rejections(
    client: AsyncClient, auth_headers, seeded, actor, target, status_value, status_code, code
):
    response = await client.patch(
        member_url(seeded, target, "status"),
        json={"status": status_value},
        headers=auth_headers(actor),
    )

    assert response.status_code == status_code
    assert response.json()["error"]["code"] == code
