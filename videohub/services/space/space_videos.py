# videohub/services/space/space_videos.py
import logging

from sqlmodel import select, desc
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import NotFound
from videohub.domain.models import AccessLevel, SpaceVideo, Video
from videohub.domain.schemas import RequestContext, VideoRead
from videohub.services.space.space_access import SpaceAccessResolver
from videohub.services.video import VideoPolicyEngine

logger = logging.getLogger(__name__)


async def add_video_to_space(
    db: AsyncSession,
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    space_id: str,
    video_id: str
) -> VideoRead:
    """
    把视频分享到 Space：需要 edit 及以上级别，且调用者自己能在当前租户内看到该视频。
    重复添加是幂等的。
    """
    await SpaceAccessResolver(db).require_level(space_id, ctx.user_id, AccessLevel.EDIT)

    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    if not await policy.can_read_video(video, ctx.user_id, ctx.tenant_id):
        raise NotFound("video not found")

    if not await db.get(SpaceVideo, (space_id, video_id)):
        db.add(SpaceVideo(space_id=space_id, video_id=video_id, added_by=ctx.user_id))
        await db.commit()
        logger.info(f"User {ctx.user_id} 将视频 {video_id} 分享到 Space {space_id}")

    return policy.convert_video_to_proto(video)


async def remove_video_from_space(db: AsyncSession, user_id: str, space_id: str, video_id: str):
    await SpaceAccessResolver(db).require_level(space_id, user_id, AccessLevel.EDIT)

    link = await db.get(SpaceVideo, (space_id, video_id))
    if not link:
        raise NotFound("video is not in this space")

    await db.delete(link)
    await db.commit()


async def list_videos_in_space(db: AsyncSession, user_id: str, space_id: str) -> list[VideoRead]:
    """Space 内的视频 (view 及以上)，已软删除的视频不返回。"""
    await SpaceAccessResolver(db).require_level(space_id, user_id, AccessLevel.VIEW)

    statement = (
        select(Video)
        .join(SpaceVideo, Video.id == SpaceVideo.video_id)
        .where(SpaceVideo.space_id == space_id)
        .where(Video.is_deleted == False)  # noqa: E712
        .order_by(desc(SpaceVideo.added_at))
    )
    videos = (await db.exec(statement)).all()
    return [VideoPolicyEngine.convert_video_to_proto(v) for v in videos]
