# videohub/services/video/video_policy.py
"""
视频操作的权限引擎。

每个请求先经过 validate_basic_request (身份 + 租户成员)，再经过具体操作的检查，
最后才允许读写视频记录。规则：

- 租户级视频 (channel_id 为空) 只有上传者本人可以修改/删除。
- 频道内视频只能通过该频道的 OWNER 权限修改/删除，上传者本人也不例外。
- 任一检查失败立即返回最具体的错误，不做聚合，也不重试。
"""
import logging

from fastapi import Request

from videohub.core.exceptions import InvalidArgument, NotFound, PermissionDenied
from videohub.domain.models import ChannelRole, Video, Visibility
from videohub.domain.schemas import RequestContext, VideoRead
from videohub.services.auth import IdentityResolver, TenantExtractor
from videohub.services.channel import ChannelRoleResolver
from videohub.services.tenant import TenantMembership
from videohub.services.video.video_store import VideoStore

logger = logging.getLogger(__name__)


class VideoPolicyEngine:
    def __init__(
        self,
        identity_resolver: IdentityResolver,
        tenant_extractor: TenantExtractor,
        tenant_membership: TenantMembership,
        channel_roles: ChannelRoleResolver,
        videos: VideoStore,
    ):
        self.identity_resolver = identity_resolver
        self.tenant_extractor = tenant_extractor
        self.tenant_membership = tenant_membership
        self.channel_roles = channel_roles
        self.videos = videos

    async def validate_basic_request(self, request: Request) -> RequestContext:
        identity = await self.identity_resolver.resolve(request)
        tenant_id = self.tenant_extractor.extract(request)
        tenant_role = await self.tenant_membership.validate(tenant_id, identity.user_id)
        return RequestContext(identity=identity, tenant_id=tenant_id, tenant_role=tenant_role)

    async def get_and_validate_video(self, video_id: str, tenant_id: str) -> Video:
        video = await self.videos.get(video_id, tenant_id)
        if video is None:
            raise NotFound("video not found")
        return video

    async def validate_channel_ownership(self, channel_id: str, user_id: str, tenant_id: str) -> None:
        role = await self.channel_roles.get_role(channel_id, user_id, tenant_id)
        if role != ChannelRole.OWNER:
            logger.info(f"User {user_id} 在频道 {channel_id} 的角色为 {role.value}，需要 owner")
            raise PermissionDenied("access denied: only channel owners can perform this action")

    async def validate_channel_access(
        self,
        channel_id: str,
        user_id: str,
        tenant_id: str,
        *required_roles: ChannelRole
    ) -> ChannelRole:
        return await self.channel_roles.require_any(channel_id, user_id, tenant_id, *required_roles)

    async def validate_video_move_permissions(
        self,
        video: Video,
        user_id: str,
        tenant_id: str,
        target_channel_id: str
    ) -> None:
        if not target_channel_id:
            raise InvalidArgument("target channel ID is required")

        try:
            await self.validate_channel_access(
                target_channel_id, user_id, tenant_id,
                ChannelRole.OWNER, ChannelRole.UPLOADER
            )
        except PermissionDenied:
            raise PermissionDenied(
                "access denied: you need uploader or owner access to add videos to the target channel"
            )

        # 租户级视频第一次进入频道，没有源频道需要检查
        if video.channel_id:
            try:
                await self.validate_channel_ownership(video.channel_id, user_id, tenant_id)
            except PermissionDenied:
                raise PermissionDenied(
                    "access denied: only the source channel owner can move videos between channels"
                )

    async def validate_video_removal_permissions(self, video: Video, user_id: str, tenant_id: str) -> None:
        if not video.channel_id:
            raise InvalidArgument("video is not in any channel")
        await self.validate_channel_ownership(video.channel_id, user_id, tenant_id)

    async def validate_video_deletion_permissions(self, video: Video, user_id: str, tenant_id: str) -> None:
        if video.channel_id:
            try:
                await self.validate_channel_ownership(video.channel_id, user_id, tenant_id)
            except PermissionDenied:
                raise PermissionDenied("access denied: only channel owners can delete videos from channels")
        elif video.uploaded_user_id != user_id:
            # 租户角色 (包括 super_admin) 不能代替上传者身份
            raise PermissionDenied("access denied: you can only delete your own tenant-level videos")

    async def validate_video_update_permissions(self, video: Video, user_id: str, tenant_id: str) -> None:
        if video.channel_id:
            await self.validate_channel_ownership(video.channel_id, user_id, tenant_id)
        elif video.uploaded_user_id != user_id:
            raise PermissionDenied("access denied: you can only edit your own tenant-level videos")

    async def can_read_video(self, video: Video, user_id: str, tenant_id: str) -> bool:
        if not video.channel_id:
            return video.uploaded_user_id == user_id
        role = await self.channel_roles.find_role(video.channel_id, user_id, tenant_id)
        return role is not None

    @staticmethod
    def convert_video_to_proto(video: Video) -> VideoRead:
        return VideoRead(
            id=video.id,
            title=video.title,
            description=video.description,
            url=video.url,
            channel_id=video.channel_id,
            uploaded_user_id=video.uploaded_user_id,
            visibility=Visibility.PRIVATE,
            created_at=video.created_at,
        )
