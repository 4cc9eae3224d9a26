# videohub/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from videohub.api import api_router
from videohub.db.session import create_db_and_tables, engine
from videohub.core.config import settings
from videohub.core.logging_setup import setup_logging

setup_logging(str(settings.LOG_FILE_PATH), log_level=settings.LOG_LEVEL)
logger = logging.getLogger("videohub.main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {settings.PROJECT_NAME} 启动中...")

    try:
        await create_db_and_tables()
        logger.info("✅ 数据库初始化完成。")
    except Exception as e:
        logger.critical(f"❌ 服务启动自检失败: {e}", exc_info=True)
        raise e

    logger.info("✅ API 服务已就绪。")
    yield

    logger.info(f"🛑 {settings.PROJECT_NAME} 正在关闭...")
    await engine.dispose()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 存储层异常统一降级为 internal error，细节只写日志
@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"数据库错误 {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal error"})

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"未处理异常 {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal error"})

app.include_router(api_router)

@app.get("/", tags=["General"])
def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

if __name__ == "__main__":
    import uvicorn
    logger.info("🔧 开发模式启动 (Direct Run)...")

    uvicorn.run(
        "videohub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_config=None,
        log_level="info"
    )
