from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from videohub.domain.models.roles import TenantRole


class TenantCreate(BaseModel):
    name: str
    description: Optional[str] = None
    is_personal: bool = False


class TenantRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_personal: bool
    created_by: str
    created_at: datetime
    role: Optional[TenantRole] = None


class TenantUserAddRequest(BaseModel):
    user_id: str
    role: TenantRole = TenantRole.MEMBER


class TenantUserRead(BaseModel):
    tenant_id: str
    user_id: str
    role: TenantRole
    created_at: datetime
