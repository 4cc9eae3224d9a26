# videohub/services/video/video_store.py
import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, desc, col, or_, and_
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import Internal
from videohub.domain.models import ChannelMember, Video

logger = logging.getLogger(__name__)


class VideoStore:
    """
    视频表的租户级访问。所有查询都以 (video_id, tenant_id) 为界，并排除已软删除的记录。
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _scoped(self, video_id: str, tenant_id: str):
        return select(Video).where(
            Video.id == video_id,
            Video.tenant_id == tenant_id,
            Video.is_deleted == False  # noqa: E712
        )

    async def get(self, video_id: str, tenant_id: str) -> Optional[Video]:
        try:
            result = await self.db.exec(self._scoped(video_id, tenant_id))
            return result.first()
        except SQLAlchemyError:
            logger.error(f"查询视频 {video_id} 失败", exc_info=True)
            raise Internal()

    async def get_for_update(self, video_id: str, tenant_id: str) -> Optional[Video]:
        """
        在写事务内重新读取并加行锁，拿到的是数据库当前值而不是 Session 缓存。
        """
        stmt = (
            self._scoped(video_id, tenant_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.exec(stmt)
            return result.first()
        except SQLAlchemyError:
            logger.error(f"锁定视频 {video_id} 失败", exc_info=True)
            raise Internal()

    async def add(self, video: Video) -> Video:
        self.db.add(video)
        return await self.save(video)

    async def save(self, video: Video) -> Video:
        video.updated_at = datetime.now()
        self.db.add(video)
        try:
            await self.db.commit()
            await self.db.refresh(video)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error(f"保存视频 {video.id} 失败", exc_info=True)
            raise Internal()
        return video

    async def list_accessible(
        self,
        user_id: str,
        tenant_id: str,
        limit: int,
        offset: int,
        channel_id: Optional[str] = None
    ) -> Sequence[Video]:
        """
        调用者可见的视频：自己上传的租户级视频 + 所属频道内的视频，按创建时间倒序。
        """
        statement = select(Video).where(
            Video.tenant_id == tenant_id,
            Video.is_deleted == False  # noqa: E712
        )

        if channel_id:
            statement = statement.where(Video.channel_id == channel_id)
        else:
            member_channels = select(ChannelMember.channel_id).where(ChannelMember.user_id == user_id)
            statement = statement.where(
                or_(
                    and_(col(Video.channel_id).is_(None), Video.uploaded_user_id == user_id),
                    col(Video.channel_id).in_(member_channels)
                )
            )

        statement = (
            statement
            .order_by(desc(Video.created_at))
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.db.exec(statement)
            return result.all()
        except SQLAlchemyError:
            logger.error(f"查询租户 {tenant_id} 视频列表失败", exc_info=True)
            raise Internal()
