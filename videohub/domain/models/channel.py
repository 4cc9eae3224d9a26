# videohub/domain/models/channel.py
import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from .roles import ChannelRole


class Channel(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # 归属关系
    tenant_id: str = Field(foreign_key="tenant.id", index=True)

    name: str
    description: Optional[str] = Field(default=None)

    created_by: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ChannelMember(SQLModel, table=True):
    """
    Channel 成员表。OWNER 也必须是显式的一行，不存在隐式拥有者。
    """
    channel_id: str = Field(foreign_key="channel.id", primary_key=True)
    user_id: str = Field(primary_key=True, index=True)

    role: ChannelRole = Field(default=ChannelRole.VIEWER)
    added_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now)
