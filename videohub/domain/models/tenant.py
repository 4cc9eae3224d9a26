# videohub/domain/models/tenant.py
import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from .roles import TenantRole


class Tenant(SQLModel, table=True):
    """
    租户：隔离频道与视频的组织边界。
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = Field(default=None)
    is_personal: bool = Field(default=False)

    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.now)


class TenantUser(SQLModel, table=True):
    """
    (tenant, user) -> role，每对唯一，本服务内不修改。
    """
    tenant_id: str = Field(foreign_key="tenant.id", primary_key=True)
    user_id: str = Field(primary_key=True, index=True)

    role: TenantRole = Field(default=TenantRole.MEMBER)
    created_at: datetime = Field(default_factory=datetime.now)
