# videohub/services/tenant/tenant_membership.py
import logging
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, desc
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.core.exceptions import Conflict, Internal, InvalidArgument, PermissionDenied
from videohub.domain.models import Tenant, TenantUser, TenantRole
from videohub.domain.schemas import TenantRead, TenantUserRead

logger = logging.getLogger(__name__)


class TenantMembership:
    """租户成员关系查询 (只读)。"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_role(self, tenant_id: str, user_id: str) -> Optional[TenantRole]:
        stmt = select(TenantUser.role).where(
            TenantUser.tenant_id == tenant_id,
            TenantUser.user_id == user_id
        )
        try:
            result = await self.db.exec(stmt)
            return result.first()
        except SQLAlchemyError:
            logger.error(f"查询租户成员失败 tenant={tenant_id} user={user_id}", exc_info=True)
            raise Internal()

    async def validate(self, tenant_id: str, user_id: str) -> TenantRole:
        role = await self.get_role(tenant_id, user_id)
        if role is None:
            logger.info(f"User {user_id} 不属于租户 {tenant_id}")
            raise PermissionDenied("access denied: user not in tenant")
        return role


# ==========================================
# 租户管理
# ==========================================

async def create_tenant(
    db: AsyncSession,
    owner_id: str,
    name: str,
    description: Optional[str] = None,
    is_personal: bool = False
) -> TenantRead:
    """
    创建租户，创建者以 super_admin 身份加入。
    """
    if not name or not name.strip():
        raise InvalidArgument("tenant name is required")

    logger.info(f"Creating tenant '{name}' for User {owner_id}")

    tenant = Tenant(
        name=name.strip(),
        description=description,
        is_personal=is_personal,
        created_by=owner_id
    )
    db.add(tenant)
    # Flush 以便获取生成的 ID，但不提交事务
    await db.flush()

    db.add(TenantUser(tenant_id=tenant.id, user_id=owner_id, role=TenantRole.SUPER_ADMIN))

    # 原子性：租户和创建者成员关系要么都成功，要么都失败
    await db.commit()
    await db.refresh(tenant)

    return TenantRead(**tenant.model_dump(), role=TenantRole.SUPER_ADMIN)


async def add_user_to_tenant(
    db: AsyncSession,
    tenant_id: str,
    operator_id: str,
    target_user_id: str,
    role: TenantRole = TenantRole.MEMBER
) -> TenantUserRead:
    """
    添加租户成员 (仅 super_admin 可操作)。成员关系建立后不再修改。
    """
    operator_role = await TenantMembership(db).validate(tenant_id, operator_id)
    if operator_role != TenantRole.SUPER_ADMIN:
        raise PermissionDenied("access denied: only tenant super admins can add users")

    if not target_user_id:
        raise InvalidArgument("user ID is required")

    existing = await db.get(TenantUser, (tenant_id, target_user_id))
    if existing:
        raise Conflict("User is already a member of this tenant")

    link = TenantUser(tenant_id=tenant_id, user_id=target_user_id, role=role)
    db.add(link)
    await db.commit()
    await db.refresh(link)

    logger.info(f"User {target_user_id} 已加入租户 {tenant_id} ({role.value})")
    return TenantUserRead(**link.model_dump())


async def list_user_tenants(db: AsyncSession, user_id: str) -> list[TenantRead]:
    statement = (
        select(Tenant, TenantUser.role)
        .join(TenantUser, Tenant.id == TenantUser.tenant_id)
        .where(TenantUser.user_id == user_id)
        .order_by(desc(Tenant.created_at))
    )
    rows = (await db.exec(statement)).all()
    return [TenantRead(**tenant.model_dump(), role=role) for tenant, role in rows]


async def list_tenant_users(
    db: AsyncSession,
    tenant_id: str,
    operator_id: str
) -> Sequence[TenantUserRead]:
    """获取租户成员 (任意成员可见)"""
    await TenantMembership(db).validate(tenant_id, operator_id)

    statement = (
        select(TenantUser)
        .where(TenantUser.tenant_id == tenant_id)
        .order_by(TenantUser.created_at)
    )
    links = (await db.exec(statement)).all()
    return [TenantUserRead(**link.model_dump()) for link in links]
