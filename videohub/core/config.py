import sys
from pathlib import Path
from typing import List
from dotenv import find_dotenv
from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 项目根目录
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_PATH = find_dotenv(usecwd=True)
if not ENV_PATH:
    print(f"警告：未找到 .env 文件，将仅依赖环境变量。当前根目录: {PROJECT_ROOT}", file=sys.stderr)

class Settings(BaseSettings):
    """
    应用配置类
    """
    PROJECT_NAME: str = "videohub"

    #db
    DATABASE_URL: str = "sqlite+aiosqlite:///./videohub.db"

    # security (token 由上游身份服务签发，这里只负责校验)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # tenant
    TENANT_ID_HEADER: str = "x-tenant-id"

    # pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # cors
    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # log
    LOG_DIR: Path = PROJECT_ROOT / "logs"
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_async_db_url(cls, v: str | None) -> str:
        if isinstance(v, str):

            if v.startswith("postgresql+psycopg2://"):
                return v.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)

            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)

            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    @computed_field
    @property
    def LOG_FILE_PATH(self) -> Path:
        return self.LOG_DIR / "videohub.log"

    model_config = SettingsConfigDict(
        env_file=ENV_PATH or None,
        env_file_encoding='utf-8',
        extra='ignore'
    )

try:
    settings = Settings()#type: ignore
except Exception as e:
    print(f"错误：加载配置失败。\n{e}", file=sys.stderr)
    sys.exit(1)
