"""
MongoDB Game Repository

Stores terms, game records and difficulty stats in MongoDB using pymongo.
Letter sets are stored as ordered string arrays.
"""

import logging
from datetime import datetime
from functools import wraps
from typing import Any, Dict, Iterable, List, Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..errors import AlreadyCompletedError, NotFoundError, RepositoryError
from ..models.game import Difficulty, DifficultyStats, GameRecord, GameResult, Term
from ..models.user import UserKey
from ..services.stats_service import apply_result
from .base import GameRepository, check_progress_fields, day_bucket

logger = logging.getLogger(__name__)

STATS_WRITE_RETRIES = 5


def storage_errors(f):
    """Surface pymongo failures as RepositoryError."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except PyMongoError as e:
            logger.error(f"MongoDB error in {f.__name__}: {e}")
            raise RepositoryError(f"Storage unavailable: {e}") from e

    return decorated_function


def _object_id(game_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(str(game_id))
    except (InvalidId, TypeError):
        return None


def _term_from_doc(doc: Dict[str, Any]) -> Term:
    return Term(
        id=str(doc["_id"]),
        word=doc["word"],
        difficulty=Difficulty(doc["difficulty"]),
        category=doc["category"],
        definition=doc["definition"],
        hint=doc["hint"],
        fun_fact=doc.get("fun_fact"),
        is_active=doc.get("is_active", True),
    )


def _game_from_doc(doc: Dict[str, Any]) -> GameRecord:
    return GameRecord(
        id=str(doc["_id"]),
        difficulty=Difficulty(doc["difficulty"]),
        word=doc["word"],
        created_at=doc["created_at"],
        day=doc["day"],
        user_id=doc.get("user_id"),
        completed=doc.get("completed", False),
        won=doc.get("won", False),
        attempts=doc.get("attempts", 0),
        hints_used=doc.get("hints_used", 0),
        time_seconds=doc.get("time_seconds"),
        guessed_letters=list(doc.get("guessed_letters") or []),
        wrong_letters=list(doc.get("wrong_letters") or []),
    )


def _stats_from_doc(doc: Dict[str, Any]) -> DifficultyStats:
    return DifficultyStats(
        id=str(doc["_id"]),
        difficulty=Difficulty(doc["difficulty"]),
        user_id=doc.get("user_id"),
        total_games=doc.get("total_games", 0),
        total_wins=doc.get("total_wins", 0),
        current_streak=doc.get("current_streak", 0),
        best_streak=doc.get("best_streak", 0),
        average_time=doc.get("average_time"),
        total_hints=doc.get("total_hints", 0),
    )


def _stats_fields(stats: DifficultyStats) -> Dict[str, Any]:
    return {
        "total_games": stats.total_games,
        "total_wins": stats.total_wins,
        "current_streak": stats.current_streak,
        "best_streak": stats.best_streak,
        "average_time": stats.average_time,
        "total_hints": stats.total_hints,
    }


class MongoGameRepository(GameRepository):
    """
    MongoDB-backed repository.

    Collections:
    - bit_words: the term catalog
    - games: one document per (difficulty, user, day), unique-indexed
    - game_stats: one document per (difficulty, user), unique-indexed
    """

    def __init__(self, mongo_uri: str, db_name: str = "bitword", client: MongoClient = None):
        """
        Initialize the repository with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the game collections
            client: Existing client to reuse instead of connecting to mongo_uri
        """
        self.client = client or MongoClient(mongo_uri, server_api=ServerApi('1'))
        self.db = self.client[db_name]
        self.terms_collection = self.db.bit_words
        self.games_collection = self.db.games
        self.stats_collection = self.db.game_stats

        # Test connection
        try:
            self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB")
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise RepositoryError(f"Could not connect to MongoDB: {e}") from e

        self._create_indexes()

    @storage_errors
    def _create_indexes(self) -> None:
        self.terms_collection.create_index([("difficulty", ASCENDING), ("word", ASCENDING)], unique=True)
        # One game per difficulty, user and day; makes find-or-create atomic
        self.games_collection.create_index(
            [("difficulty", ASCENDING), ("user_key", ASCENDING), ("day", ASCENDING)], unique=True
        )
        self.stats_collection.create_index(
            [("difficulty", ASCENDING), ("user_key", ASCENDING)], unique=True
        )

    # -------------------------
    # Terms
    # -------------------------

    @storage_errors
    def get_terms(self, difficulty: Difficulty) -> List[Term]:
        cursor = self.terms_collection.find(
            {"difficulty": Difficulty(difficulty).value}
        ).sort("_id", ASCENDING)
        return [_term_from_doc(doc) for doc in cursor]

    @storage_errors
    def find_term(self, difficulty: Difficulty, word: str) -> Optional[Term]:
        doc = self.terms_collection.find_one({"difficulty": Difficulty(difficulty).value, "word": word})
        return _term_from_doc(doc) if doc else None

    @storage_errors
    def seed_terms(self, terms: Iterable[Term]) -> int:
        if self.terms_collection.count_documents({}, limit=1):
            return 0

        docs = [{
            "word": term.word,
            "difficulty": term.difficulty.value,
            "category": term.category,
            "definition": term.definition,
            "hint": term.hint,
            "fun_fact": term.fun_fact,
            "is_active": term.is_active,
        } for term in terms]
        if not docs:
            return 0

        result = self.terms_collection.insert_many(docs, ordered=True)
        logger.info(f"Seeded {len(result.inserted_ids)} terms into the catalog")
        return len(result.inserted_ids)

    # -------------------------
    # Games
    # -------------------------

    @storage_errors
    def get_game(self, game_id: str) -> Optional[GameRecord]:
        object_id = _object_id(game_id)
        if object_id is None:
            return None
        doc = self.games_collection.find_one({"_id": object_id})
        return _game_from_doc(doc) if doc else None

    @storage_errors
    def get_todays_game(self, difficulty: Difficulty, user: UserKey,
                        now: Optional[datetime] = None) -> Optional[GameRecord]:
        doc = self.games_collection.find_one({
            "difficulty": Difficulty(difficulty).value,
            "user_key": user.storage_key,
            "day": day_bucket(now or datetime.now()),
        })
        return _game_from_doc(doc) if doc else None

    @storage_errors
    def get_or_create_todays_game(self, difficulty: Difficulty, word: str, user: UserKey,
                                  now: Optional[datetime] = None) -> GameRecord:
        now = now or datetime.now()
        key = {
            "difficulty": Difficulty(difficulty).value,
            "user_key": user.storage_key,
            "day": day_bucket(now),
        }
        new_game = {
            "word": word,
            "user_id": user.user_id,
            "completed": False,
            "won": False,
            "attempts": 0,
            "hints_used": 0,
            "time_seconds": None,
            "guessed_letters": [],
            "wrong_letters": [],
            "created_at": now,
        }

        try:
            doc = self.games_collection.find_one_and_update(
                key,
                {"$setOnInsert": new_game},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # A concurrent upsert for the same key won the race
            doc = self.games_collection.find_one(key)

        return _game_from_doc(doc)

    @storage_errors
    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Optional[GameRecord]:
        fields = check_progress_fields(fields)
        object_id = _object_id(game_id)
        if object_id is None:
            return None

        doc = self.games_collection.find_one_and_update(
            {"_id": object_id, "completed": False},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            if self.games_collection.count_documents({"_id": object_id}, limit=1):
                raise AlreadyCompletedError(f"Game {game_id} is already completed")
            return None

        return _game_from_doc(doc)

    @storage_errors
    def complete_game(self, game_id: str, result: GameResult) -> GameRecord:
        object_id = _object_id(game_id)
        if object_id is None:
            raise NotFoundError(f"Game {game_id} not found")

        doc = self.games_collection.find_one_and_update(
            {"_id": object_id, "completed": False},
            {"$set": {
                "completed": True,
                "won": result.won,
                "time_seconds": result.time_seconds,
                "attempts": result.attempts,
                "hints_used": result.hints_used,
            }},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            if self.games_collection.count_documents({"_id": object_id}, limit=1):
                raise AlreadyCompletedError(f"Game {game_id} is already completed")
            raise NotFoundError(f"Game {game_id} not found")

        return _game_from_doc(doc)

    @storage_errors
    def _restore_game(self, record: GameRecord) -> None:
        self.games_collection.update_one(
            {"_id": ObjectId(record.id)},
            {"$set": {
                "completed": record.completed,
                "won": record.won,
                "time_seconds": record.time_seconds,
                "attempts": record.attempts,
                "hints_used": record.hints_used,
            }},
        )

    # -------------------------
    # Stats
    # -------------------------

    @storage_errors
    def get_stats(self, difficulty: Difficulty, user: UserKey) -> Optional[DifficultyStats]:
        doc = self.stats_collection.find_one({
            "difficulty": Difficulty(difficulty).value,
            "user_key": user.storage_key,
        })
        return _stats_from_doc(doc) if doc else None

    @storage_errors
    def get_all_stats(self, user: UserKey) -> List[DifficultyStats]:
        cursor = self.stats_collection.find({"user_key": user.storage_key}).sort("_id", ASCENDING)
        return [_stats_from_doc(doc) for doc in cursor]

    @storage_errors
    def apply_game_result(self, difficulty: Difficulty, result: GameResult,
                          user: UserKey) -> DifficultyStats:
        key = {"difficulty": Difficulty(difficulty).value, "user_key": user.storage_key}

        for _ in range(STATS_WRITE_RETRIES):
            doc = self.stats_collection.find_one(key)
            existing = _stats_from_doc(doc) if doc else None
            updated = apply_result(existing, result, difficulty=difficulty, user=user)

            if doc is None:
                try:
                    inserted = self.stats_collection.insert_one(
                        {**key, "user_id": user.user_id, **_stats_fields(updated)}
                    )
                except DuplicateKeyError:
                    continue
                updated.id = str(inserted.inserted_id)
                return updated

            # Only write if nobody folded another game in since the read
            write = self.stats_collection.update_one(
                {"_id": doc["_id"], "total_games": doc.get("total_games", 0)},
                {"$set": _stats_fields(updated)},
            )
            if write.matched_count:
                return updated

        raise RepositoryError(f"Could not update stats for {key} after {STATS_WRITE_RETRIES} attempts")
