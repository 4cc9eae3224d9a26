# videohub/domain/models/space.py
import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from .roles import AccessLevel


class SpaceBase(SQLModel):
    name: str = Field(index=True)
    description: Optional[str] = Field(default=None)


class Space(SpaceBase, table=True):
    """
    可分享的视频集合。创建者即拥有者，拥有者不需要成员行。
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class SpaceMember(SQLModel, table=True):
    space_id: str = Field(foreign_key="space.id", primary_key=True)
    user_id: str = Field(primary_key=True, index=True)

    access_level: AccessLevel = Field(default=AccessLevel.VIEW)
    joined_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class SpaceVideo(SQLModel, table=True):
    space_id: str = Field(foreign_key="space.id", primary_key=True)
    video_id: str = Field(foreign_key="video.id", primary_key=True)

    added_by: str
    added_at: datetime = Field(default_factory=datetime.now)
