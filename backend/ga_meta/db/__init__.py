"""
Database module containing session management and base models.
"""
from ga_meta.db.session import get_db, async_session_maker, engine
from ga_meta.db.base import Base

__all__ = ["get_db", "async_session_maker", "engine", "Base"]
