from .api import ApiClient, ApiError
from .preview import preview_budget, preview_goal, reconcile
from .session import MappingTokenStore, MemoryTokenStore, Session, TokenStore

__all__ = [
    "ApiClient",
    "ApiError",
    "MappingTokenStore",
    "MemoryTokenStore",
    "Session",
    "TokenStore",
    "preview_budget",
    "preview_goal",
    "reconcile",
]
