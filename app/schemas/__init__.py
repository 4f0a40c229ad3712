# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .codecheck import *
from .todoist import *
from .user import *
