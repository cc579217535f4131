"""User entity module.

This module contains all lead-related classes organized by responsibility:
- User: Domain entity handed out to callers
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import CompanyCount, User, UserCreate, UserPatch, normalize_email
from .repository import DuplicateEmailError, UserRepository
from .table import UserTable

__all__ = [
    "CompanyCount",
    "DuplicateEmailError",
    "User",
    "UserCreate",
    "UserPatch",
    "UserRepository",
    "UserTable",
    "normalize_email",
]
