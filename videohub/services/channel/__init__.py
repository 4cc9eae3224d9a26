from .channel_roles import ChannelRoleResolver

__all__ = ["ChannelRoleResolver"]
