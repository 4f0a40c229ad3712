"""
Models package initialization.
"""

from .base import Base, BaseModel
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
]
