# videohub/domain/schemas/space.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from videohub.domain.models.roles import AccessLevel


class SpaceCreate(BaseModel):
    name: str
    description: Optional[str] = None


class SpaceRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    created_at: datetime
    # 调用者在该 Space 中的有效级别，拥有者为 owner
    access_level: Optional[AccessLevel] = None


class SpaceMemberAddRequest(BaseModel):
    user_id: str
    access_level: AccessLevel


class SpaceMemberRead(BaseModel):
    space_id: str
    user_id: str
    access_level: AccessLevel
    joined_at: datetime


class SpaceVideoAddRequest(BaseModel):
    video_id: str
