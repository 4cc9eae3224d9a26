# tests/api/test_spaces_api.py
import pytest

from tests.conftest import get_auth_header

@pytest.mark.asyncio
async def test_shared_space_flow(async_client):
    # U1 创建 Space
    resp = await async_client.post("/spaces", json={"name": "Shared Space"}, headers=get_auth_header("U1"))
    assert resp.status_code == 200
    space = resp.json()
    assert space["owner_id"] == "U1"
    assert space["access_level"] == "owner"

    # U1 授权 U2 view
    resp = await async_client.post(
        f"/spaces/{space['id']}/members",
        json={"user_id": "U2", "access_level": "view"},
        headers=get_auth_header("U1")
    )
    assert resp.status_code == 200
    assert resp.json()["access_level"] == "view"

    # U2 能看到，U3 看不到
    resp = await async_client.get("/spaces", headers=get_auth_header("U2"))
    assert resp.status_code == 200
    assert [(s["id"], s["access_level"]) for s in resp.json()] == [(space["id"], "view")]

    resp = await async_client.get("/spaces", headers=get_auth_header("U3"))
    assert resp.json() == []

    resp = await async_client.get(f"/spaces/{space['id']}", headers=get_auth_header("U3"))
    assert resp.status_code == 404

@pytest.mark.asyncio
async def test_non_owner_cannot_grant(async_client):
    resp = await async_client.post("/spaces", json={"name": "S"}, headers=get_auth_header("U1"))
    space_id = resp.json()["id"]
    await async_client.post(
        f"/spaces/{space_id}/members",
        json={"user_id": "U2", "access_level": "admin"},
        headers=get_auth_header("U1")
    )

    # admin 级别的成员也不能管理成员
    resp = await async_client.post(
        f"/spaces/{space_id}/members",
        json={"user_id": "U3", "access_level": "view"},
        headers=get_auth_header("U2")
    )
    assert resp.status_code == 403

    resp = await async_client.get(f"/spaces/{space_id}/members", headers=get_auth_header("U2"))
    assert resp.status_code == 403

@pytest.mark.asyncio
async def test_invalid_level_rejected(async_client):
    resp = await async_client.post("/spaces", json={"name": "S"}, headers=get_auth_header("U1"))
    space_id = resp.json()["id"]

    resp = await async_client.post(
        f"/spaces/{space_id}/members",
        json={"user_id": "U2", "access_level": "owner"},
        headers=get_auth_header("U1")
    )
    assert resp.status_code == 400

    # 级别必须显式给出
    resp = await async_client.post(
        f"/spaces/{space_id}/members", json={"user_id": "U2"}, headers=get_auth_header("U1")
    )
    assert resp.status_code == 422

    # 未知级别由请求校验拒绝
    resp = await async_client.post(
        f"/spaces/{space_id}/members",
        json={"user_id": "U2", "access_level": "superuser"},
        headers=get_auth_header("U1")
    )
    assert resp.status_code == 422

@pytest.mark.asyncio
async def test_spaces_require_token(async_client):
    resp = await async_client.get("/spaces")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"

@pytest.mark.asyncio
async def test_share_video_to_space(async_client, tenant, channels):
    headers = get_auth_header("bob", tenant.id)
    resp = await async_client.post(
        "/videos", json={"title": "clip", "channel_id": channels["news"].id}, headers=headers
    )
    video_id = resp.json()["id"]

    resp = await async_client.post("/spaces", json={"name": "picks"}, headers=headers)
    space_id = resp.json()["id"]

    resp = await async_client.post(f"/spaces/{space_id}/videos", json={"video_id": video_id}, headers=headers)
    assert resp.status_code == 200

    resp = await async_client.get(f"/spaces/{space_id}/videos", headers=headers)
    assert [v["id"] for v in resp.json()] == [video_id]

    resp = await async_client.delete(f"/spaces/{space_id}/videos/{video_id}", headers=headers)
    assert resp.status_code == 200
