# videohub/api/routes/spaces.py
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.api import deps
from videohub.domain.schemas import (
    Identity,
    RequestContext,
    SpaceCreate,
    SpaceMemberAddRequest,
    SpaceMemberRead,
    SpaceRead,
    SpaceVideoAddRequest,
    VideoRead,
)
from videohub.services.space import SpaceAccessResolver, space_videos
from videohub.services.video import VideoPolicyEngine

router = APIRouter()

# ------------------ Space management ------------------

@router.post("", response_model=SpaceRead)
async def handle_create_space(
    space_in: SpaceCreate,
    spaces: SpaceAccessResolver = Depends(deps.get_space_resolver),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await spaces.create_space(identity.user_id, space_in.name, space_in.description)

@router.get("", response_model=List[SpaceRead])
async def handle_list_spaces(
    spaces: SpaceAccessResolver = Depends(deps.get_space_resolver),
    identity: Identity = Depends(deps.get_current_identity),
):
    """当前用户拥有或被分享的 Space (带 access_level)"""
    return await spaces.list_spaces_for_user(identity.user_id)

@router.get("/{space_id}", response_model=SpaceRead)
async def handle_get_space(
    space_id: str,
    spaces: SpaceAccessResolver = Depends(deps.get_space_resolver),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await spaces.get_space(identity.user_id, space_id)

# ------------------ Member management ------------------

@router.post("/{space_id}/members", response_model=SpaceMemberRead)
async def handle_add_user_to_space(
    space_id: str,
    req: SpaceMemberAddRequest,
    spaces: SpaceAccessResolver = Depends(deps.get_space_resolver),
    identity: Identity = Depends(deps.get_current_identity),
):
    """授权成员 (Owner only)"""
    return await spaces.add_member(identity.user_id, space_id, req.user_id, req.access_level)

@router.get("/{space_id}/members", response_model=List[SpaceMemberRead])
async def handle_list_space_members(
    space_id: str,
    spaces: SpaceAccessResolver = Depends(deps.get_space_resolver),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await spaces.list_members(identity.user_id, space_id)

# ------------------ Space videos ------------------

@router.post("/{space_id}/videos", response_model=VideoRead)
async def handle_add_video_to_space(
    space_id: str,
    req: SpaceVideoAddRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    policy: VideoPolicyEngine = Depends(deps.get_video_policy),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """分享视频到 Space (需要租户上下文来定位视频)"""
    return await space_videos.add_video_to_space(db, policy, ctx, space_id, req.video_id)

@router.get("/{space_id}/videos", response_model=List[VideoRead])
async def handle_list_space_videos(
    space_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await space_videos.list_videos_in_space(db, identity.user_id, space_id)

@router.delete("/{space_id}/videos/{video_id}")
async def handle_remove_video_from_space(
    space_id: str,
    video_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    await space_videos.remove_video_from_space(db, identity.user_id, space_id, video_id)
    return {"message": "Video removed from space"}
