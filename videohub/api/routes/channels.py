# videohub/api/routes/channels.py
from typing import List, Sequence

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.api import deps
from videohub.domain.schemas import (
    ChannelCreate,
    ChannelMemberAddRequest,
    ChannelMemberRead,
    ChannelRead,
    ChannelUpdate,
    RequestContext,
)
from videohub.services.channel import channel_crud

router = APIRouter()

# ------------------ Channel management ------------------

@router.post("", response_model=ChannelRead)
async def handle_create_channel(
    channel_in: ChannelCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """创建频道 (创建者成为 owner)"""
    return await channel_crud.create_channel(db, ctx, channel_in.name, channel_in.description)

@router.get("", response_model=List[ChannelRead])
async def handle_list_channels(
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await channel_crud.list_channels(db, ctx)

@router.put("/{channel_id}", response_model=ChannelRead)
async def handle_update_channel(
    channel_id: str,
    channel_in: ChannelUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    return await channel_crud.update_channel(
        db, ctx, channel_id, channel_in.name, channel_in.description
    )

# ------------------ Member management ------------------

@router.get("/{channel_id}/members", response_model=Sequence[ChannelMemberRead])
async def handle_get_channel_members(
    channel_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """获取成员列表"""
    return await channel_crud.get_channel_members(db, ctx, channel_id)

@router.post("/{channel_id}/members", response_model=ChannelMemberRead)
async def handle_add_channel_member(
    channel_id: str,
    req: ChannelMemberAddRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """添加成员 (Owner only)"""
    return await channel_crud.add_channel_member(db, ctx, channel_id, req.user_id, req.role)

@router.delete("/{channel_id}/members/{user_id}")
async def handle_remove_channel_member(
    channel_id: str,
    user_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    ctx: RequestContext = Depends(deps.get_request_context),
):
    """移除成员 (Owner only)"""
    await channel_crud.remove_channel_member(db, ctx, channel_id, user_id)
    return {"message": "Member removed"}
