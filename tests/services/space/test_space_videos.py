# tests/services/space/test_space_videos.py
import pytest
import pytest_asyncio

from videohub.core.exceptions import NotFound, PermissionDenied
from videohub.domain.models import AccessLevel
from videohub.domain.schemas import VideoCreate
from videohub.services.space import SpaceAccessResolver, space_videos
from videohub.services.video import video_crud
from tests.conftest import make_ctx

@pytest_asyncio.fixture
async def space(db_session, tenant):
    """carol 拥有的 Space：bob 为 edit，dan 为 view"""
    resolver = SpaceAccessResolver(db_session)
    s = await resolver.create_space("carol", "highlights")
    await resolver.add_member("carol", s.id, "bob", AccessLevel.EDIT)
    await resolver.add_member("carol", s.id, "dan", AccessLevel.VIEW)
    return s

@pytest_asyncio.fixture
async def news_video(policy, tenant, channels):
    return await video_crud.create_video(
        policy, make_ctx("bob", tenant.id), VideoCreate(title="morning news", channel_id=channels["news"].id)
    )

@pytest.mark.asyncio
async def test_editor_shares_video(db_session, policy, tenant, space, news_video):
    shared = await space_videos.add_video_to_space(
        db_session, policy, make_ctx("bob", tenant.id), space.id, news_video.id
    )
    assert shared.id == news_video.id

    # 重复添加是幂等的
    await space_videos.add_video_to_space(db_session, policy, make_ctx("bob", tenant.id), space.id, news_video.id)

    videos = await space_videos.list_videos_in_space(db_session, "dan", space.id)
    assert [v.id for v in videos] == [news_video.id]

@pytest.mark.asyncio
async def test_viewer_cannot_share(db_session, policy, tenant, space, news_video):
    with pytest.raises(PermissionDenied):
        await space_videos.add_video_to_space(
            db_session, policy, make_ctx("dan", tenant.id), space.id, news_video.id
        )

@pytest.mark.asyncio
async def test_cannot_share_unreadable_video(db_session, policy, tenant, news_video):
    """dan 拥有 Space，但不是 news 频道成员，看不到该视频"""
    own = await SpaceAccessResolver(db_session).create_space("dan", "dan's picks")

    with pytest.raises(NotFound):
        await space_videos.add_video_to_space(
            db_session, policy, make_ctx("dan", tenant.id), own.id, news_video.id
        )

@pytest.mark.asyncio
async def test_stranger_cannot_list(db_session, space):
    with pytest.raises(NotFound):
        await space_videos.list_videos_in_space(db_session, "mallory", space.id)

@pytest.mark.asyncio
async def test_deleted_videos_hidden(db_session, policy, tenant, space, news_video):
    await space_videos.add_video_to_space(db_session, policy, make_ctx("bob", tenant.id), space.id, news_video.id)

    await video_crud.delete_video(policy, make_ctx("alice", tenant.id), news_video.id)

    assert await space_videos.list_videos_in_space(db_session, "carol", space.id) == []

@pytest.mark.asyncio
async def test_remove_video_from_space(db_session, policy, tenant, space, news_video):
    await space_videos.add_video_to_space(db_session, policy, make_ctx("bob", tenant.id), space.id, news_video.id)

    with pytest.raises(PermissionDenied):
        await space_videos.remove_video_from_space(db_session, "dan", space.id, news_video.id)

    await space_videos.remove_video_from_space(db_session, "bob", space.id, news_video.id)
    assert await space_videos.list_videos_in_space(db_session, "carol", space.id) == []

    with pytest.raises(NotFound):
        await space_videos.remove_video_from_space(db_session, "carol", space.id, news_video.id)
