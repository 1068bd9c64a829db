"""
Users domain package.

Public API:
- Identity: User, Role
- Session persistence: SessionStore
"""
from .models import Role, User
from .session import SessionStore

__all__ = ["Role", "User", "SessionStore"]
