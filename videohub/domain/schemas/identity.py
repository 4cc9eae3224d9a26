from typing import Optional
from pydantic import BaseModel

from videohub.domain.models.roles import TenantRole


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None


# 上游身份服务校验后的调用者
class Identity(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None


class RequestContext(BaseModel):
    identity: Identity
    tenant_id: str
    tenant_role: TenantRole

    @property
    def user_id(self) -> str:
        return self.identity.user_id
