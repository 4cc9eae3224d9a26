# videohub/api/deps.py

import logging
from typing import AsyncGenerator
from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.config import settings
from videohub.core.logging_setup import bind_request_context
from videohub.db.session import get_session
from videohub.domain.schemas import Identity, RequestContext
from videohub.services.auth import (
    HeaderTenantExtractor,
    IdentityResolver,
    JWTIdentityResolver,
    TenantExtractor,
)
from videohub.services.channel import ChannelRoleResolver
from videohub.services.space import SpaceAccessResolver
from videohub.services.tenant import TenantMembership
from videohub.services.video import VideoPolicyEngine, VideoStore

logger = logging.getLogger(__name__)

async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session

def get_identity_resolver() -> IdentityResolver:
    return JWTIdentityResolver(settings.SECRET_KEY, settings.ALGORITHM)

def get_tenant_extractor() -> TenantExtractor:
    return HeaderTenantExtractor(settings.TENANT_ID_HEADER)

async def get_current_identity(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    identity = await resolver.resolve(request)
    bind_request_context(None, identity.user_id)
    return identity

def get_video_policy(
    db: AsyncSession = Depends(get_db_session),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
    tenant_extractor: TenantExtractor = Depends(get_tenant_extractor),
) -> VideoPolicyEngine:
    return VideoPolicyEngine(
        identity_resolver=identity_resolver,
        tenant_extractor=tenant_extractor,
        tenant_membership=TenantMembership(db),
        channel_roles=ChannelRoleResolver(db),
        videos=VideoStore(db),
    )

async def get_request_context(
    request: Request,
    policy: VideoPolicyEngine = Depends(get_video_policy),
) -> RequestContext:
    """身份 + 租户成员校验，所有租户级接口的入口。"""
    ctx = await policy.validate_basic_request(request)
    bind_request_context(ctx.tenant_id, ctx.user_id)
    return ctx

def get_space_resolver(db: AsyncSession = Depends(get_db_session)) -> SpaceAccessResolver:
    return SpaceAccessResolver(db)
