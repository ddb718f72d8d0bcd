"""
Relational persistence: engine and session management, ORM tables and
repositories.
"""

from .engine import (
    Database,
    DatabaseConfig,
    DatabaseConnectionError,
    create_database,
)

__all__ = [
    "Database",
    "DatabaseConfig",
    "DatabaseConnectionError",
    "create_database",
]
