# videohub/services/auth/identity.py
"""
请求级协作者：身份解析与租户 ID 提取。

Token 的签发属于上游身份服务，这里只校验 Bearer Token 并取出调用者身份。
"""
import logging
from typing import Optional, Protocol

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
from jose import jwt, JWTError
from pydantic import ValidationError

from videohub.core.exceptions import InvalidArgument, Unauthenticated
from videohub.domain.schemas import Identity, TokenPayload

logger = logging.getLogger(__name__)


class IdentityResolver(Protocol):
    async def resolve(self, request: Request) -> Identity: ...


class TenantExtractor(Protocol):
    def extract(self, request: Request) -> str: ...


class JWTIdentityResolver:
    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def resolve(self, request: Request) -> Identity:
        token = self._bearer_token(request)
        return self.verify(token)

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            token_data = TokenPayload(**payload)
        except (JWTError, ValidationError) as e:
            logger.info(f"Token 校验失败: {e}")
            raise Unauthenticated("invalid authentication token")

        if not token_data.sub:
            raise Unauthenticated("user identifier not found in token")

        return Identity(user_id=token_data.sub, name=token_data.name, email=token_data.email)

    @staticmethod
    def _bearer_token(request: Request) -> str:
        authorization: Optional[str] = request.headers.get("Authorization")
        scheme, param = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != "bearer" or not param:
            raise Unauthenticated("missing authorization header")
        return param


class HeaderTenantExtractor:
    def __init__(self, header_name: str = "x-tenant-id"):
        self.header_name = header_name

    def extract(self, request: Request) -> str:
        tenant_id = (request.headers.get(self.header_name) or "").strip()
        if not tenant_id:
            raise InvalidArgument("tenant ID is required")
        return tenant_id
