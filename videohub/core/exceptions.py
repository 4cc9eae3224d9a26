# videohub/core/exceptions.py
"""
鉴权失败分类。

所有分类都继承 FastAPI 的 HTTPException，服务层直接抛出，由框架转换为响应。
Internal 的 detail 固定为 "internal error"，存储层细节只写日志。
"""
from typing import Optional

from fastapi import HTTPException, status


class AccessError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class InvalidArgument(AccessError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "invalid argument"


class Unauthenticated(AccessError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class PermissionDenied(AccessError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "access denied"


class NotFound(AccessError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "not found"


class Conflict(AccessError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "already exists"


class Internal(AccessError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "internal error"

    def __init__(self):
        super().__init__(self.default_detail)
