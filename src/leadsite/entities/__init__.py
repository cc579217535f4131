"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and input models
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import User, UserRepository, UserTable

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
]
