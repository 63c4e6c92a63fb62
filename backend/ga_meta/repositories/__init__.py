"""
Repository layer for database access.
"""
from ga_meta.repositories.corpus_repo import CorpusRepository

__all__ = ["CorpusRepository"]
