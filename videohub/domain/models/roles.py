# videohub/domain/models/roles.py
from enum import Enum


class TenantRole(str, Enum):
    MEMBER = "member"
    SUPER_ADMIN = "super_admin"


class ChannelRole(str, Enum):
    OWNER = "owner"         # 拥有者：可移动/移出/删除频道内视频，管理成员
    UPLOADER = "uploader"   # 上传者：可向频道添加视频
    VIEWER = "viewer"       # 观察者：仅可浏览


_ACCESS_RANK = {"view": 1, "edit": 2, "admin": 3, "owner": 4}


class AccessLevel(str, Enum):
    """
    Space 访问级别，全序 view < edit < admin < owner。
    OWNER 只由创建者身份推导得出，不能作为授权级别写入成员表。
    """
    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self.value]

    def at_least(self, required: "AccessLevel") -> bool:
        return self.rank >= required.rank

    @classmethod
    def grantable(cls) -> list["AccessLevel"]:
        return [cls.VIEW, cls.EDIT, cls.ADMIN]


class Visibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
