# videohub/api/routes/videos.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from videohub.api import deps
from videohub.core.config import settings
from videohub.domain.schemas import (
    RequestContext,
    VideoCreate,
    VideoListResponse,
    VideoMoveRequest,
    VideoRead,
    VideoUpdate,
)
from videohub.services.video import VideoPolicyEngine, video_crud

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=VideoRead)
async def handle_create_video(
    video_in: VideoCreate,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await video_crud.create_video(policy, ctx, video_in)

@router.get("", response_model=VideoListResponse)
async def handle_list_videos(
    page_size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    page_number: int = Query(default=0, ge=0),
    channel_id: Optional[str] = None,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """
    当前租户内调用者可见的视频 (分页，按创建时间倒序)
    """
    return await video_crud.list_videos(policy, ctx, page_size, page_number, channel_id)

@router.get("/{video_id}", response_model=VideoRead)
async def handle_get_video(
    video_id: str,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await video_crud.get_video(policy, ctx, video_id)

@router.put("/{video_id}", response_model=VideoRead)
async def handle_update_video(
    video_id: str,
    video_in: VideoUpdate,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """更新视频，channel_id 变化时即移动视频；channel_id 为 null 会被拒绝 (请用 remove-from-channel)"""
    return await video_crud.update_video(policy, ctx, video_id, video_in)

@router.post("/{video_id}/move", response_model=VideoRead)
async def handle_move_video(
    video_id: str,
    req: VideoMoveRequest,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await video_crud.move_video(policy, ctx, video_id, req.target_channel_id)

@router.post("/{video_id}/remove-from-channel", response_model=VideoRead)
async def handle_remove_video_from_channel(
    video_id: str,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await video_crud.remove_video_from_channel(policy, ctx, video_id)

@router.delete("/{video_id}")
async def handle_delete_video(
    video_id: str,
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    await video_crud.delete_video(policy, ctx, video_id)
    return {"message": f"视频 {video_id} 已删除"}
