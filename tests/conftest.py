import os

# 配置必须在导入 videohub 之前就位
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Optional
from httpx import AsyncClient, ASGITransport
from jose import jwt
from starlette.requests import Request

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel.pool import StaticPool

from videohub.api import deps
from videohub.main import app
from videohub.core.config import settings
from videohub.domain.models import TenantRole, TenantUser, ChannelMember, ChannelRole
from videohub.domain.schemas import Identity, RequestContext
from videohub.services.auth import HeaderTenantExtractor, JWTIdentityResolver
from videohub.services.channel import ChannelRoleResolver, channel_crud
from videohub.services.tenant import TenantMembership, tenant_membership
from videohub.services.video import VideoPolicyEngine, VideoStore

# ==========================================
# 1. 数据库 Fixtures
# ==========================================

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest_asyncio.fixture(name="db_session")
async def db_session_fixture() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_db_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[deps.get_db_session] = override_get_db_session

    async with session_maker() as session:
        yield session

    app.dependency_overrides.clear()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()

@pytest_asyncio.fixture
async def async_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

# ==========================================
# 2. 身份 Helpers
# ==========================================

def create_test_token(sub: Optional[str], **claims) -> str:
    to_encode = dict(claims)
    if sub is not None:
        to_encode["sub"] = sub
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def get_auth_header(user_id: str, tenant_id: Optional[str] = None) -> dict:
    headers = {"Authorization": f"Bearer {create_test_token(user_id, name=user_id, email=f'{user_id}@test.com')}"}
    if tenant_id:
        headers[settings.TENANT_ID_HEADER] = tenant_id
    return headers

def build_request(headers: dict) -> Request:
    """构造一个只带 header 的 Starlette Request，供 validate_basic_request 使用"""
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})

def make_ctx(user_id: str, tenant_id: str, role: TenantRole = TenantRole.MEMBER) -> RequestContext:
    return RequestContext(identity=Identity(user_id=user_id), tenant_id=tenant_id, tenant_role=role)

# ==========================================
# 3. 数据 Fixtures
# ==========================================

@pytest.fixture
def policy(db_session) -> VideoPolicyEngine:
    return VideoPolicyEngine(
        identity_resolver=JWTIdentityResolver(settings.SECRET_KEY, settings.ALGORITHM),
        tenant_extractor=HeaderTenantExtractor(settings.TENANT_ID_HEADER),
        tenant_membership=TenantMembership(db_session),
        channel_roles=ChannelRoleResolver(db_session),
        videos=VideoStore(db_session),
    )

@pytest_asyncio.fixture
async def tenant(db_session):
    """
    租户 acme：alice 为 super_admin，bob / carol / dan 为 member。
    mallory 不属于该租户。
    """
    t = await tenant_membership.create_tenant(db_session, "alice", "acme")
    for user_id in ["bob", "carol", "dan"]:
        db_session.add(TenantUser(tenant_id=t.id, user_id=user_id, role=TenantRole.MEMBER))
    await db_session.commit()
    return t

async def add_channel_member(db_session, channel_id: str, user_id: str, role: ChannelRole):
    db_session.add(ChannelMember(channel_id=channel_id, user_id=user_id, role=role))
    await db_session.commit()

@pytest_asyncio.fixture
async def channels(db_session, tenant):
    """
    两个频道：
    - news:   alice owner, bob uploader, carol viewer
    - sports: bob owner, alice uploader
    """
    news = await channel_crud.create_channel(db_session, make_ctx("alice", tenant.id), "news")
    await add_channel_member(db_session, news.id, "bob", ChannelRole.UPLOADER)
    await add_channel_member(db_session, news.id, "carol", ChannelRole.VIEWER)

    sports = await channel_crud.create_channel(db_session, make_ctx("bob", tenant.id), "sports")
    await add_channel_member(db_session, sports.id, "alice", ChannelRole.UPLOADER)

    return {"news": news, "sports": sports}
