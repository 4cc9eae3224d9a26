# videohub/services/channel/channel_crud.py
import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlmodel import select, desc
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import Conflict, InvalidArgument, NotFound
from videohub.domain.models import Channel, ChannelMember, ChannelRole, TenantUser
from videohub.domain.schemas import ChannelRead, ChannelMemberRead, RequestContext
from videohub.services.channel.channel_roles import ChannelRoleResolver

logger = logging.getLogger(__name__)

# ==========================================
# 频道管理
# ==========================================

async def create_channel(
    db: AsyncSession,
    ctx: RequestContext,
    name: str,
    description: Optional[str] = None
) -> ChannelRead:
    """
    创建频道，创建者以显式的 OWNER 行加入。
    """
    if not name or not name.strip():
        raise InvalidArgument("channel name is required")

    channel = Channel(
        tenant_id=ctx.tenant_id,
        name=name.strip(),
        description=description,
        created_by=ctx.user_id
    )
    db.add(channel)
    await db.flush()

    db.add(ChannelMember(
        channel_id=channel.id,
        user_id=ctx.user_id,
        role=ChannelRole.OWNER,
        added_by=ctx.user_id
    ))
    await db.commit()
    await db.refresh(channel)

    logger.info(f"User {ctx.user_id} 在租户 {ctx.tenant_id} 创建频道 {channel.id}")
    return ChannelRead(**channel.model_dump(), role=ChannelRole.OWNER)


async def update_channel(
    db: AsyncSession,
    ctx: RequestContext,
    channel_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None
) -> ChannelRead:
    """更新频道信息 (仅 OWNER)"""
    role = await ChannelRoleResolver(db).require_any(channel_id, ctx.user_id, ctx.tenant_id, ChannelRole.OWNER)

    channel = await db.get(Channel, channel_id)
    if not channel:
        raise NotFound("channel not found")

    if name is not None:
        if not name.strip():
            raise InvalidArgument("channel name cannot be empty")
        channel.name = name.strip()
    if description is not None:
        channel.description = description
    channel.updated_at = datetime.now()

    db.add(channel)
    await db.commit()
    await db.refresh(channel)
    return ChannelRead(**channel.model_dump(), role=role)


async def list_channels(db: AsyncSession, ctx: RequestContext) -> list[ChannelRead]:
    """获取调用者在当前租户中所属的频道 (带 Role)"""
    statement = (
        select(Channel, ChannelMember.role)
        .join(ChannelMember, Channel.id == ChannelMember.channel_id)
        .where(Channel.tenant_id == ctx.tenant_id)
        .where(ChannelMember.user_id == ctx.user_id)
        .order_by(desc(Channel.created_at))
    )
    rows = (await db.exec(statement)).all()
    return [ChannelRead(**c.model_dump(), role=role) for c, role in rows]

# ==========================================
# 成员管理逻辑
# ==========================================

async def get_channel_members(
    db: AsyncSession,
    ctx: RequestContext,
    channel_id: str
) -> Sequence[ChannelMemberRead]:
    """获取成员列表 (任意成员可见)"""
    await ChannelRoleResolver(db).get_role(channel_id, ctx.user_id, ctx.tenant_id)

    statement = (
        select(ChannelMember)
        .where(ChannelMember.channel_id == channel_id)
        .order_by(ChannelMember.created_at)
    )
    members = (await db.exec(statement)).all()
    return [ChannelMemberRead(**m.model_dump()) for m in members]


async def add_channel_member(
    db: AsyncSession,
    ctx: RequestContext,
    channel_id: str,
    target_user_id: str,
    target_role: ChannelRole
) -> ChannelMemberRead:
    """
    添加成员 (仅 OWNER 可操作)。目标用户必须是同一租户的成员。
    """
    # 1. 鉴权: 操作者必须是 OWNER
    await ChannelRoleResolver(db).require_any(channel_id, ctx.user_id, ctx.tenant_id, ChannelRole.OWNER)

    # 2. 目标用户必须在当前租户内
    if not await db.get(TenantUser, (ctx.tenant_id, target_user_id)):
        raise InvalidArgument("user is not a member of this tenant")

    # 3. 检查是否已存在
    if await db.get(ChannelMember, (channel_id, target_user_id)):
        raise Conflict("User is already a member")

    # 4. 插入成员行
    member = ChannelMember(
        channel_id=channel_id,
        user_id=target_user_id,
        role=target_role,
        added_by=ctx.user_id
    )
    db.add(member)
    await db.commit()
    await db.refresh(member)

    return ChannelMemberRead(**member.model_dump())


async def remove_channel_member(
    db: AsyncSession,
    ctx: RequestContext,
    channel_id: str,
    target_user_id: str
):
    """
    移除成员 (仅 OWNER 可操作)
    """
    # 1. 鉴权
    await ChannelRoleResolver(db).require_any(channel_id, ctx.user_id, ctx.tenant_id, ChannelRole.OWNER)

    # 2. 获取目标成员
    target = await db.get(ChannelMember, (channel_id, target_user_id))
    if not target:
        raise NotFound("Member not found")

    # 频道不能没有 OWNER
    if target.role == ChannelRole.OWNER:
        owners_stmt = select(ChannelMember).where(
            ChannelMember.channel_id == channel_id,
            ChannelMember.role == ChannelRole.OWNER
        )
        owners = (await db.exec(owners_stmt)).all()
        if len(owners) <= 1:
            raise InvalidArgument("Cannot remove the last OWNER")

    await db.delete(target)
    await db.commit()
    logger.info(f"User {ctx.user_id} 从频道 {channel_id} 移除了 {target_user_id}")
