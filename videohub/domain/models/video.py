# videohub/domain/models/video.py
import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field


class VideoBase(SQLModel):
    title: str
    description: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None, description="存储层返回的播放地址")


class Video(VideoBase, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # 归属关系
    tenant_id: str = Field(foreign_key="tenant.id", index=True)
    uploaded_user_id: str = Field(index=True)
    # None 表示租户级视频 (不属于任何频道)
    channel_id: Optional[str] = Field(default=None, foreign_key="channel.id", index=True)

    is_deleted: bool = Field(default=False) # 软删除，终态

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_tenant_level(self) -> bool:
        return not self.channel_id
