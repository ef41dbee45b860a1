"""User entity module.

This module contains all User-related classes organized by responsibility:
- User, Address, Avatar: Domain entities with business logic
- UserTable, AddressTable: Database persistence models
- UserRepository: Data access layer
"""

from .entity import Address, Avatar, User, UserRole
from .repository import UserRepository
from .table import AddressTable, UserTable

__all__ = [
    "Address",
    "AddressTable",
    "Avatar",
    "User",
    "UserRepository",
    "UserRole",
    "UserTable",
]
