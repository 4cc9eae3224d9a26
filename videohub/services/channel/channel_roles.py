# videohub/services/channel/channel_roles.py
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import Internal, PermissionDenied
from videohub.domain.models import Channel, ChannelMember, ChannelRole

logger = logging.getLogger(__name__)


class ChannelRoleResolver:
    """
    解析用户在频道中的角色。查询联表 Channel 并限定租户，
    其他租户的频道与"不是成员"无法区分。
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_role(self, channel_id: str, user_id: str, tenant_id: str) -> Optional[ChannelRole]:
        stmt = (
            select(ChannelMember.role)
            .join(Channel, Channel.id == ChannelMember.channel_id)
            .where(ChannelMember.channel_id == channel_id)
            .where(ChannelMember.user_id == user_id)
            .where(Channel.tenant_id == tenant_id)
        )
        try:
            result = await self.db.exec(stmt)
            return result.first()
        except SQLAlchemyError:
            logger.error(f"查询频道角色失败 channel={channel_id} user={user_id}", exc_info=True)
            raise Internal()

    async def get_role(self, channel_id: str, user_id: str, tenant_id: str) -> ChannelRole:
        role = await self.find_role(channel_id, user_id, tenant_id)
        if role is None:
            raise PermissionDenied("access denied: you are not a member of this channel")
        return role

    async def require_any(
        self,
        channel_id: str,
        user_id: str,
        tenant_id: str,
        *allowed: ChannelRole
    ) -> ChannelRole:
        """
        allowed 是集合 (逻辑或)，不是等级：只允许 viewer 时 owner 也会被拒绝。
        """
        role = await self.get_role(channel_id, user_id, tenant_id)
        if role not in allowed:
            logger.info(f"User {user_id} 在频道 {channel_id} 的角色为 {role.value}，不在 {[r.value for r in allowed]} 内")
            raise PermissionDenied("access denied: insufficient permissions for this channel")
        return role
