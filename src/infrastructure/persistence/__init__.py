"""Database persistence infrastructure.

- BaseModel: declarative base for all models
- Database: async engine and session management
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
