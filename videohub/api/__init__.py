from fastapi import APIRouter
from .routes import tenants, channels, spaces, videos

api_router = APIRouter()
api_router.include_router(tenants.router, prefix="/tenants", tags=["Tenants"])
api_router.include_router(channels.router, prefix="/channels", tags=["Channels"])
api_router.include_router(spaces.router, prefix="/spaces", tags=["Spaces"])
api_router.include_router(videos.router, prefix="/videos", tags=["Videos"])
