# videohub/services/video/video_crud.py
import logging
from typing import Optional

from videohub.core.exceptions import InvalidArgument, NotFound, PermissionDenied
from videohub.domain.models import ChannelRole, Video
from videohub.domain.schemas import RequestContext, VideoCreate, VideoListResponse, VideoRead, VideoUpdate
from videohub.services.video.video_policy import VideoPolicyEngine

logger = logging.getLogger(__name__)


async def _lock_unchanged(
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    video_id: str,
    checked_channel_id: Optional[str]
) -> Video:
    """
    写入前在事务内重新读取视频，频道归属在权限检查之后发生变化则拒绝。
    """
    locked = await policy.videos.get_for_update(video_id, ctx.tenant_id)
    if locked is None:
        raise NotFound("video not found")
    if locked.channel_id != checked_channel_id:
        logger.info(f"视频 {video_id} 在权限检查后被移动 ({checked_channel_id} -> {locked.channel_id})")
        raise PermissionDenied("access denied: video channel changed, permissions no longer apply")
    return locked


async def create_video(
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    video_in: VideoCreate
) -> VideoRead:
    """
    登记视频元数据 (文件本身由存储服务处理)。指定频道时需要 owner 或 uploader 角色。
    """
    if not video_in.title or not video_in.title.strip():
        raise InvalidArgument("video title is required")

    if video_in.channel_id:
        await policy.validate_channel_access(
            video_in.channel_id, ctx.user_id, ctx.tenant_id,
            ChannelRole.OWNER, ChannelRole.UPLOADER
        )

    video = Video(
        tenant_id=ctx.tenant_id,
        uploaded_user_id=ctx.user_id,
        channel_id=video_in.channel_id or None,
        title=video_in.title.strip(),
        description=video_in.description,
        url=video_in.url,
    )
    video = await policy.videos.add(video)
    logger.info(f"User {ctx.user_id} 在租户 {ctx.tenant_id} 创建视频 {video.id}")
    return policy.convert_video_to_proto(video)


async def get_video(policy: VideoPolicyEngine, ctx: RequestContext, video_id: str) -> VideoRead:
    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    if not await policy.can_read_video(video, ctx.user_id, ctx.tenant_id):
        # 没有读权限同样报 404，防止探测视频 ID
        raise NotFound("video not found")
    return policy.convert_video_to_proto(video)


async def list_videos(
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    page_size: int,
    page_number: int,
    channel_id: Optional[str] = None
) -> VideoListResponse:
    if page_size < 1 or page_number < 0:
        raise InvalidArgument("page_size must be positive and page_number non-negative")

    if channel_id:
        await policy.validate_channel_access(channel_id, ctx.user_id, ctx.tenant_id, *ChannelRole)

    videos = await policy.videos.list_accessible(
        ctx.user_id,
        ctx.tenant_id,
        limit=page_size,
        offset=page_size * page_number,
        channel_id=channel_id
    )
    return VideoListResponse(
        videos=[policy.convert_video_to_proto(v) for v in videos],
        page_size=page_size,
        page_number=page_number
    )


async def move_video(
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    video_id: str,
    target_channel_id: str
) -> VideoRead:
    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    source_channel_id = video.channel_id

    await policy.validate_video_move_permissions(video, ctx.user_id, ctx.tenant_id, target_channel_id)

    locked = await _lock_unchanged(policy, ctx, video_id, source_channel_id)
    # 租户级视频只能由上传者本人移入频道
    if locked.is_tenant_level and locked.uploaded_user_id != ctx.user_id:
        raise PermissionDenied("access denied: you can only move your own tenant-level videos")

    if locked.channel_id == target_channel_id:
        return policy.convert_video_to_proto(locked)

    locked.channel_id = target_channel_id
    locked = await policy.videos.save(locked)
    logger.info(f"视频 {video_id} 已从 {source_channel_id or 'tenant'} 移动到频道 {target_channel_id}")
    return policy.convert_video_to_proto(locked)


async def remove_video_from_channel(policy: VideoPolicyEngine, ctx: RequestContext, video_id: str) -> VideoRead:
    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    source_channel_id = video.channel_id

    await policy.validate_video_removal_permissions(video, ctx.user_id, ctx.tenant_id)

    locked = await _lock_unchanged(policy, ctx, video_id, source_channel_id)
    locked.channel_id = None
    locked = await policy.videos.save(locked)
    logger.info(f"视频 {video_id} 已从频道 {source_channel_id} 移出")
    return policy.convert_video_to_proto(locked)


async def update_video(
    policy: VideoPolicyEngine,
    ctx: RequestContext,
    video_id: str,
    video_in: VideoUpdate
) -> VideoRead:
    """
    更新视频元数据；channel_id 与当前频道不同时按移动处理。
    """
    # 移出频道只能走 remove_video_from_channel
    if "channel_id" in video_in.model_fields_set and video_in.channel_id is None:
        raise InvalidArgument("channel_id cannot be null, use /remove-from-channel instead")

    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    source_channel_id = video.channel_id

    update_data = video_in.model_dump(exclude_unset=True, exclude_none=True)
    target_channel_id = update_data.pop("channel_id", None)
    is_move = target_channel_id is not None and target_channel_id != source_channel_id

    if "title" in update_data and not update_data["title"].strip():
        raise InvalidArgument("video title cannot be empty")

    if not update_data and not is_move:
        return await get_video(policy, ctx, video_id)

    if update_data:
        await policy.validate_video_update_permissions(video, ctx.user_id, ctx.tenant_id)
    if is_move:
        await policy.validate_video_move_permissions(video, ctx.user_id, ctx.tenant_id, target_channel_id)

    locked = await _lock_unchanged(policy, ctx, video_id, source_channel_id)
    if is_move and locked.is_tenant_level and locked.uploaded_user_id != ctx.user_id:
        raise PermissionDenied("access denied: you can only move your own tenant-level videos")

    for key, value in update_data.items():
        setattr(locked, key, value)
    if is_move:
        locked.channel_id = target_channel_id

    locked = await policy.videos.save(locked)
    return policy.convert_video_to_proto(locked)


async def delete_video(policy: VideoPolicyEngine, ctx: RequestContext, video_id: str):
    """
    软删除视频。删除后的视频对所有操作不可见，且不可恢复。
    """
    video = await policy.get_and_validate_video(video_id, ctx.tenant_id)
    source_channel_id = video.channel_id

    await policy.validate_video_deletion_permissions(video, ctx.user_id, ctx.tenant_id)

    locked = await _lock_unchanged(policy, ctx, video_id, source_channel_id)
    locked.is_deleted = True
    await policy.videos.save(locked)
    logger.info(f"User {ctx.user_id} 删除了视频 {video_id}")
