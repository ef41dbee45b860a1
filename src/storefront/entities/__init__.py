"""Entities module with hybrid entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with business logic
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import (
    Address,
    AddressTable,
    Avatar,
    User,
    UserRepository,
    UserRole,
    UserTable,
)

__all__ = [
    "Address",
    "AddressTable",
    "Avatar",
    "User",
    "UserRepository",
    "UserRole",
    "UserTable",
]
