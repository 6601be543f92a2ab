"""
Game Configuration Constants Module

This module defines the game rules and the seed term catalog. All game
parameters are centralized here to enable easy modification.
"""

import json
import os
from collections import Counter
from typing import Dict, Final, List

from ..models.game import Difficulty, Term

# Core Game Configuration Constants
MAX_ATTEMPTS: Final[int] = 3
"""
Number of incorrect letter guesses that ends a game.
Type: Final[int] - default only; the running value comes from Config.MAX_ATTEMPTS
"""

MAX_HINTS: Final[int] = 1
"""Hints a player may consume per game."""

# Score computation
BASE_SCORE: Final[int] = 1000
TIME_BONUS_WINDOW_SECONDS: Final[int] = 300
ATTEMPT_PENALTY: Final[int] = 50
HINT_PENALTY: Final[int] = 100

DIFFICULTY_MULTIPLIERS: Final[Dict[Difficulty, float]] = {
    Difficulty.BEGINNER: 1,
    Difficulty.INTERMEDIATE: 1.5,
    Difficulty.ADVANCED: 2,
}

DIFFICULTY_DESCRIPTIONS: Final[Dict[Difficulty, str]] = {
    Difficulty.BEGINNER: "Basic Bitcoin terms like wallet, blockchain, and satoshi",
    Difficulty.INTERMEDIATE: "Austrian economics concepts and Bitcoin business models",
    Difficulty.ADVANCED: "Technical Bitcoin concepts, mining, and cryptography",
}


def _load_term_catalog() -> List[Term]:
    """
    Load the seed catalog from bitwords.json.

    Returns:
        List[Term]: Terms in file order

    Raises:
        FileNotFoundError: If bitwords.json file is not found
        ValueError: If the file is malformed or an entry is invalid
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'bitwords.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Term catalog file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in bitwords.json: {e}")

    if not isinstance(entries, list):
        raise ValueError("JSON file must contain an array of terms")

    if not entries:
        raise ValueError("Term catalog cannot be empty")

    terms = []
    for entry in entries:
        word = str(entry.get('word', '')).upper()
        if not word or not word.isalpha() or not word.isascii():
            raise ValueError(f"Term '{word}' must contain only letters A-Z")

        try:
            difficulty = Difficulty(entry.get('difficulty'))
        except ValueError:
            raise ValueError(f"Term '{word}' has unknown difficulty '{entry.get('difficulty')}'")

        for required in ('category', 'definition', 'hint'):
            if not entry.get(required):
                raise ValueError(f"Term '{word}' is missing '{required}'")

        terms.append(Term(
            word=word,
            difficulty=difficulty,
            category=entry['category'],
            definition=entry['definition'],
            hint=entry['hint'],
            fun_fact=entry.get('fun_fact'),
            is_active=entry.get('is_active', True),
        ))

    return terms


# Seed catalog loaded from JSON file
TERM_CATALOG: Final[List[Term]] = _load_term_catalog()


def validate_term_catalog_integrity(terms: List[Term] = None) -> bool:
    """
    Validates the integrity and consistency of the term catalog.

    Checks that every word is uppercase A-Z and that no word appears twice
    within the same difficulty.

    Returns:
        bool: True if the catalog passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    terms = TERM_CATALOG if terms is None else terms
    if not terms:
        raise ValueError("Term catalog cannot be empty")

    seen = set()
    for index, term in enumerate(terms):
        if not term.word.isalpha() or not term.word.isascii():
            raise ValueError(f"Term at index {index} '{term.word}' contains non-alphabetic characters")

        if not term.word.isupper():
            raise ValueError(f"Term at index {index} '{term.word}' is not in uppercase format")

        key = (term.difficulty, term.word)
        if key in seen:
            raise ValueError(f"Duplicate term '{term.word}' for difficulty '{term.difficulty.value}'")
        seen.add(key)

    return True


def get_catalog_statistics(terms: List[Term] = None) -> dict:
    """
    Analyzes the catalog and returns statistical information for game balancing.

    Returns:
        dict: total_terms, terms_per_difficulty, avg_word_length and
        most_common_letters
    """
    terms = TERM_CATALOG if terms is None else terms
    if not terms:
        return {"error": "Term catalog is empty"}

    letter_frequency = Counter(letter for term in terms for letter in term.word)

    return {
        "total_terms": len(terms),
        "terms_per_difficulty": {
            difficulty.value: sum(1 for term in terms if term.difficulty == difficulty)
            for difficulty in Difficulty
        },
        "avg_word_length": round(sum(len(term.word) for term in terms) / len(terms), 2),
        "most_common_letters": letter_frequency.most_common(5)
    }


if __name__ == "__main__":

    try:
        validate_term_catalog_integrity()
        print(" Term catalog validation passed")

        stats = get_catalog_statistics()
        print(f" Catalog statistics: {stats}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
