# tests/services/channel/test_channel_roles.py
import pytest
from sqlmodel import select

from videohub.core.exceptions import Conflict, InvalidArgument, NotFound, PermissionDenied
from videohub.domain.models import ChannelMember, ChannelRole
from videohub.services.channel import ChannelRoleResolver, channel_crud
from videohub.services.tenant import tenant_membership
from tests.conftest import make_ctx

@pytest.mark.asyncio
async def test_get_role(db_session, tenant, channels):
    resolver = ChannelRoleResolver(db_session)
    news = channels["news"]

    assert await resolver.get_role(news.id, "alice", tenant.id) == ChannelRole.OWNER
    assert await resolver.get_role(news.id, "bob", tenant.id) == ChannelRole.UPLOADER
    assert await resolver.get_role(news.id, "carol", tenant.id) == ChannelRole.VIEWER

@pytest.mark.asyncio
async def test_get_role_non_member(db_session, tenant, channels):
    with pytest.raises(PermissionDenied) as exc:
        await ChannelRoleResolver(db_session).get_role(channels["news"].id, "dan", tenant.id)
    assert "not a member" in exc.value.detail

@pytest.mark.asyncio
async def test_get_role_is_tenant_scoped(db_session, tenant, channels):
    """alice 是 news 的 owner，但以另一个租户的 ID 查询时视为非成员"""
    other = await tenant_membership.create_tenant(db_session, "alice", "side project")

    with pytest.raises(PermissionDenied):
        await ChannelRoleResolver(db_session).get_role(channels["news"].id, "alice", other.id)

@pytest.mark.asyncio
async def test_create_channel_adds_explicit_owner_row(db_session, tenant):
    channel = await channel_crud.create_channel(db_session, make_ctx("dan", tenant.id), "docs")

    rows = (await db_session.exec(
        select(ChannelMember).where(ChannelMember.channel_id == channel.id)
    )).all()
    assert [(r.user_id, r.role) for r in rows] == [("dan", ChannelRole.OWNER)]
    assert channel.tenant_id == tenant.id

@pytest.mark.asyncio
async def test_create_channel_requires_name(db_session, tenant):
    with pytest.raises(InvalidArgument):
        await channel_crud.create_channel(db_session, make_ctx("dan", tenant.id), "")

@pytest.mark.asyncio
async def test_update_channel_owner_only(db_session, tenant, channels):
    news = channels["news"]
    with pytest.raises(PermissionDenied):
        await channel_crud.update_channel(db_session, make_ctx("bob", tenant.id), news.id, name="hacked")

    updated = await channel_crud.update_channel(
        db_session, make_ctx("alice", tenant.id), news.id, name="world news"
    )
    assert updated.name == "world news"
    assert updated.role == ChannelRole.OWNER

@pytest.mark.asyncio
async def test_list_channels_only_memberships(db_session, tenant, channels):
    carol_channels = await channel_crud.list_channels(db_session, make_ctx("carol", tenant.id))
    assert [(c.name, c.role) for c in carol_channels] == [("news", ChannelRole.VIEWER)]

    alice_channels = await channel_crud.list_channels(db_session, make_ctx("alice", tenant.id))
    assert {c.name: c.role for c in alice_channels} == {
        "news": ChannelRole.OWNER,
        "sports": ChannelRole.UPLOADER,
    }

@pytest.mark.asyncio
async def test_get_members_requires_membership(db_session, tenant, channels):
    members = await channel_crud.get_channel_members(db_session, make_ctx("carol", tenant.id), channels["news"].id)
    assert {m.user_id for m in members} == {"alice", "bob", "carol"}

    with pytest.raises(PermissionDenied):
        await channel_crud.get_channel_members(db_session, make_ctx("dan", tenant.id), channels["news"].id)

@pytest.mark.asyncio
async def test_add_member_owner_only(db_session, tenant, channels):
    news = channels["news"]

    with pytest.raises(PermissionDenied):
        await channel_crud.add_channel_member(
            db_session, make_ctx("bob", tenant.id), news.id, "dan", ChannelRole.VIEWER
        )

    member = await channel_crud.add_channel_member(
        db_session, make_ctx("alice", tenant.id), news.id, "dan", ChannelRole.UPLOADER
    )
    assert member.role == ChannelRole.UPLOADER

@pytest.mark.asyncio
async def test_add_member_must_be_in_tenant(db_session, tenant, channels):
    with pytest.raises(InvalidArgument):
        await channel_crud.add_channel_member(
            db_session, make_ctx("alice", tenant.id), channels["news"].id, "mallory", ChannelRole.VIEWER
        )

@pytest.mark.asyncio
async def test_add_member_duplicate(db_session, tenant, channels):
    with pytest.raises(Conflict):
        await channel_crud.add_channel_member(
            db_session, make_ctx("alice", tenant.id), channels["news"].id, "carol", ChannelRole.OWNER
        )

@pytest.mark.asyncio
async def test_remove_member(db_session, tenant, channels):
    news = channels["news"]
    owner_ctx = make_ctx("alice", tenant.id)

    await channel_crud.remove_channel_member(db_session, owner_ctx, news.id, "carol")
    assert await ChannelRoleResolver(db_session).find_role(news.id, "carol", tenant.id) is None

    with pytest.raises(NotFound):
        await channel_crud.remove_channel_member(db_session, owner_ctx, news.id, "carol")

@pytest.mark.asyncio
async def test_cannot_remove_last_owner(db_session, tenant, channels):
    with pytest.raises(InvalidArgument) as exc:
        await channel_crud.remove_channel_member(
            db_session, make_ctx("alice", tenant.id), channels["news"].id, "alice"
        )
    assert "last OWNER" in exc.value.detail

@pytest.mark.asyncio
async def test_require_any_is_a_set(db_session, tenant, channels):
    resolver = ChannelRoleResolver(db_session)
    news = channels["news"].id

    assert await resolver.require_any(news, "bob", tenant.id, ChannelRole.OWNER, ChannelRole.UPLOADER) == ChannelRole.UPLOADER
    with pytest.raises(PermissionDenied):
        await resolver.require_any(news, "alice", tenant.id, ChannelRole.VIEWER)

@pytest.mark.asyncio
async def test_channel_management_and_policy_share_role_check(db_session, policy, tenant, channels):
    """频道管理与视频策略走同一个角色检查，拒绝信息一致"""
    news = channels["news"].id

    with pytest.raises(PermissionDenied) as crud_exc:
        await channel_crud.update_channel(db_session, make_ctx("carol", tenant.id), news, name="x")
    with pytest.raises(PermissionDenied) as policy_exc:
        await policy.validate_channel_access(news, "carol", tenant.id, ChannelRole.OWNER)

    assert crud_exc.value.detail == policy_exc.value.detail
