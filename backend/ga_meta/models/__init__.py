"""
SQLAlchemy models for the Grand Archive meta backend.
"""
from ga_meta.models.event import CrawlerState, Event, EventFormat
from ga_meta.models.standing import Standing
from ga_meta.models.decklist import Decklist
from ga_meta.models.card import Card, Champion

__all__ = [
    "Event",
    "EventFormat",
    "CrawlerState",
    "Standing",
    "Decklist",
    "Card",
    "Champion",
]
