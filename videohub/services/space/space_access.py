# videohub/services/space/space_access.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import Internal, InvalidArgument, NotFound, PermissionDenied
from videohub.domain.models import AccessLevel, Space, SpaceMember
from videohub.domain.schemas import SpaceRead, SpaceMemberRead

logger = logging.getLogger(__name__)


class SpaceAccessResolver:
    """
    Space 共享层。与租户/频道鉴权相互独立：
    拥有者由创建者身份推导 (没有成员行)，其余用户按成员行上的级别授权。
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==========================================
    # 权限检查辅助函数
    # ==========================================

    async def get_space_or_404(self, space_id: str) -> Space:
        try:
            space = await self.db.get(Space, space_id)
        except SQLAlchemyError:
            logger.error(f"查询 Space {space_id} 失败", exc_info=True)
            raise Internal()
        if not space:
            raise NotFound("space not found")
        return space

    async def effective_level(self, space: Space, user_id: str) -> Optional[AccessLevel]:
        if space.owner_id == user_id:
            return AccessLevel.OWNER
        member = await self.db.get(SpaceMember, (space.id, user_id))
        return member.access_level if member else None

    async def require_level(
        self,
        space_id: str,
        user_id: str,
        minimum: AccessLevel
    ) -> tuple[Space, AccessLevel]:
        """
        校验用户在 Space 中的级别不低于 minimum。
        完全没有访问权的用户报 404，防止探测 Space ID；有访问权但级别不足报 403。
        """
        space = await self.get_space_or_404(space_id)
        level = await self.effective_level(space, user_id)
        if level is None:
            raise NotFound("space not found")
        if not level.at_least(minimum):
            raise PermissionDenied(f"access denied: requires {minimum.value} access to this space")
        return space, level

    async def require_owner(self, space_id: str, user_id: str) -> Space:
        space = await self.get_space_or_404(space_id)
        if space.owner_id != user_id:
            logger.info(f"User {user_id} 不是 Space {space_id} 的拥有者")
            raise PermissionDenied("access denied: only the space owner can manage members")
        return space

    # ==========================================
    # Space 管理
    # ==========================================

    async def create_space(
        self,
        owner_id: str,
        name: str,
        description: Optional[str] = None
    ) -> SpaceRead:
        if not name or not name.strip():
            raise InvalidArgument("space name is required")

        space = Space(owner_id=owner_id, name=name.strip(), description=description)
        self.db.add(space)
        await self.db.commit()
        await self.db.refresh(space)

        logger.info(f"User {owner_id} 创建 Space {space.id} ({space.name})")
        return SpaceRead(**space.model_dump(), access_level=AccessLevel.OWNER)

    async def get_space(self, user_id: str, space_id: str) -> SpaceRead:
        space, level = await self.require_level(space_id, user_id, AccessLevel.VIEW)
        return SpaceRead(**space.model_dump(), access_level=level)

    async def list_spaces_for_user(self, user_id: str) -> list[SpaceRead]:
        """
        用户拥有的 Space 与被授权的 Space 的并集，按创建时间倒序。
        """
        owned = (await self.db.exec(select(Space).where(Space.owner_id == user_id))).all()
        shared_stmt = (
            select(Space, SpaceMember.access_level)
            .join(SpaceMember, Space.id == SpaceMember.space_id)
            .where(SpaceMember.user_id == user_id)
        )
        shared = (await self.db.exec(shared_stmt)).all()

        spaces: dict[str, tuple[Space, AccessLevel]] = {}
        for space, level in shared:
            spaces[space.id] = (space, level)
        # 拥有者身份优先于成员行
        for space in owned:
            spaces[space.id] = (space, AccessLevel.OWNER)

        ordered = sorted(spaces.values(), key=lambda item: item[0].created_at, reverse=True)
        return [SpaceRead(**space.model_dump(), access_level=level) for space, level in ordered]

    # ==========================================
    # 成员管理逻辑
    # ==========================================

    async def add_member(
        self,
        actor_id: str,
        space_id: str,
        target_user_id: str,
        level: AccessLevel
    ) -> SpaceMemberRead:
        """
        授权成员 (仅拥有者可操作)。已存在的成员行会被覆盖级别，joined_at 保留首次授权时间。
        """
        space = await self.require_owner(space_id, actor_id)

        if level not in AccessLevel.grantable():
            raise InvalidArgument(f"invalid access level: {level.value}")
        if not target_user_id:
            raise InvalidArgument("user ID is required")
        if target_user_id == space.owner_id:
            raise InvalidArgument("the space owner already has full access")

        member = await self.db.get(SpaceMember, (space.id, target_user_id))
        if member:
            member.access_level = level
            member.updated_at = datetime.now()
        else:
            member = SpaceMember(space_id=space.id, user_id=target_user_id, access_level=level)
        self.db.add(member)
        try:
            await self.db.commit()
        except IntegrityError:
            # 并发的首次授权先写入了同一行，改为更新该行
            await self.db.rollback()
            member = await self.db.get(SpaceMember, (space_id, target_user_id))
            if member is None:
                raise
            member.access_level = level
            member.updated_at = datetime.now()
            self.db.add(member)
            await self.db.commit()
        await self.db.refresh(member)

        logger.info(f"Space {space_id}: User {target_user_id} 授权为 {level.value}")
        return SpaceMemberRead(**member.model_dump())

    async def list_members(self, actor_id: str, space_id: str) -> list[SpaceMemberRead]:
        space = await self.require_owner(space_id, actor_id)

        statement = (
            select(SpaceMember)
            .where(SpaceMember.space_id == space.id)
            .order_by(SpaceMember.joined_at)
        )
        members = (await self.db.exec(statement)).all()
        return [SpaceMemberRead(**m.model_dump()) for m in members]
