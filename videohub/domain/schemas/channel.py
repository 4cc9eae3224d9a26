from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from videohub.domain.models.roles import ChannelRole


class ChannelCreate(BaseModel):
    name: str
    description: Optional[str] = None


class ChannelUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ChannelRead(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    created_by: str
    created_at: datetime
    role: Optional[ChannelRole] = None


class ChannelMemberAddRequest(BaseModel):
    user_id: str
    role: ChannelRole = ChannelRole.VIEWER


class ChannelMemberRead(BaseModel):
    channel_id: str
    user_id: str
    role: ChannelRole
    created_at: datetime
