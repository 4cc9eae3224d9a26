# videohub/domain/models/__init__.py
from .roles import TenantRole, ChannelRole, AccessLevel, Visibility
from .tenant import Tenant, TenantUser
from .channel import Channel, ChannelMember
from .space import Space, SpaceMember, SpaceVideo
from .video import Video

__all__ = [
    "TenantRole", "ChannelRole", "AccessLevel", "Visibility",
    "Tenant", "TenantUser",
    "Channel", "ChannelMember",
    "Space", "SpaceMember", "SpaceVideo",
    "Video",
]
