"""
Repositories Package

Storage behind the game service: a MongoDB implementation and an in-memory
one sharing the GameRepository interface.
"""

from .base import GameRepository, day_bucket
from .memory_repository import InMemoryGameRepository
from .mongo_repository import MongoGameRepository

__all__ = ['GameRepository', 'day_bucket', 'InMemoryGameRepository', 'MongoGameRepository']
