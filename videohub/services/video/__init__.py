from .video_store import VideoStore
from .video_policy import VideoPolicyEngine

__all__ = ["VideoStore", "VideoPolicyEngine"]
