from .space_access import SpaceAccessResolver

__all__ = ["SpaceAccessResolver"]
