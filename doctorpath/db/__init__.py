"""
Persistence: ORM models, engine/session factory, storage and demo seed.
"""
from .models import Base
from .session import SessionLocal, engine, get_db, init_db
from .storage import Storage

__all__ = ["Base", "SessionLocal", "Storage", "engine", "get_db", "init_db"]
