"""Database configuration and utilities."""

from .session import Base, create_db_engine

__all__ = ["Base", "create_db_engine"]
