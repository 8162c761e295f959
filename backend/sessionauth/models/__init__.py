from sessionauth.models.blocked_token import BlockedToken
from sessionauth.models.refresh_token import RefreshToken
from sessionauth.models.user import User

__all__ = [
    "BlockedToken",
    "RefreshToken",
    "User",
]
