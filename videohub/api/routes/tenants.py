# videohub/api/routes/tenants.py
import logging
from typing import List, Sequence

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from videohub.api import deps
from videohub.domain.schemas import (
    Identity,
    TenantCreate,
    TenantRead,
    TenantUserAddRequest,
    TenantUserRead,
)
from videohub.services.tenant import tenant_membership

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=TenantRead)
async def handle_create_tenant(
    tenant_in: TenantCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    """创建租户 (创建者成为 super_admin)"""
    return await tenant_membership.create_tenant(
        db, identity.user_id, tenant_in.name, tenant_in.description, tenant_in.is_personal
    )

@router.get("", response_model=List[TenantRead])
async def handle_list_my_tenants(
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await tenant_membership.list_user_tenants(db, identity.user_id)

@router.post("/{tenant_id}/members", response_model=TenantUserRead)
async def handle_add_tenant_user(
    tenant_id: str,
    req: TenantUserAddRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    """添加租户成员 (super_admin only)"""
    return await tenant_membership.add_user_to_tenant(
        db, tenant_id, identity.user_id, req.user_id, req.role
    )

@router.get("/{tenant_id}/members", response_model=Sequence[TenantUserRead])
async def handle_list_tenant_users(
    tenant_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    identity: Identity = Depends(deps.get_current_identity),
):
    return await tenant_membership.list_tenant_users(db, tenant_id, identity.user_id)
