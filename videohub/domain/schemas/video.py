# videohub/domain/schemas/video.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from videohub.domain.models.roles import Visibility


class VideoCreate(BaseModel):
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    channel_id: Optional[str] = None


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    # 与当前频道不同即视为移动
    channel_id: Optional[str] = None


class VideoMoveRequest(BaseModel):
    target_channel_id: str


# 对外暴露的视频结构
class VideoRead(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    channel_id: Optional[str] = None
    uploaded_user_id: str
    visibility: Visibility = Visibility.PRIVATE
    created_at: datetime


class VideoListResponse(BaseModel):
    videos: List[VideoRead]
    page_size: int
    page_number: int
