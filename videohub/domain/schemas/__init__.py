from .identity import TokenPayload, Identity, RequestContext
from .tenant import TenantCreate, TenantRead, TenantUserAddRequest, TenantUserRead
from .channel import (
    ChannelCreate, ChannelUpdate, ChannelRead, ChannelMemberAddRequest, ChannelMemberRead
)
from .space import SpaceCreate, SpaceRead, SpaceMemberAddRequest, SpaceMemberRead, SpaceVideoAddRequest
from .video import VideoCreate, VideoUpdate, VideoMoveRequest, VideoRead, VideoListResponse

__all__ = [
    "TokenPayload", "Identity", "RequestContext",
    "TenantCreate", "TenantRead", "TenantUserAddRequest", "TenantUserRead",
    "ChannelCreate", "ChannelUpdate", "ChannelRead", "ChannelMemberAddRequest", "ChannelMemberRead",
    "SpaceCreate", "SpaceRead", "SpaceMemberAddRequest", "SpaceMemberRead", "SpaceVideoAddRequest",
    "VideoCreate", "VideoUpdate", "VideoMoveRequest", "VideoRead", "VideoListResponse",
]
