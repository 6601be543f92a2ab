"""Unit tests for request parsing helpers and the seed catalog."""
from bitword.config import TERM_CATALOG, get_catalog_statistics, validate_term_catalog_integrity
from bitword.models import ANONYMOUS, Difficulty, RegisteredUser
from bitword.utils.helpers import (
    parse_difficulty,
    parse_user_id,
    validate_completion_payload,
    validate_progress_payload,
)


def test_parse_difficulty():
    assert parse_difficulty("ADVANCED") == (Difficulty.ADVANCED, "")
    value, error = parse_difficulty("expert")
    assert value is None
    assert "beginner" in error
    assert parse_difficulty(None)[1] == "Difficulty is required"


def test_parse_user_id():
    assert parse_user_id(None) == (ANONYMOUS, "")
    assert parse_user_id("12") == (RegisteredUser(12), "")
    assert parse_user_id(True)[0] is None
    assert parse_user_id("twelve")[0] is None


def test_validate_completion_payload():
    result, error = validate_completion_payload({"won": False, "time_seconds": 61})
    assert error == ""
    assert result.attempts == 0
    assert validate_completion_payload({"won": True})[1] == "time_seconds must be a non-negative integer"
    assert validate_completion_payload([])[0] is None


def test_validate_progress_payload():
    fields, error = validate_progress_payload({"wrong_letters": ["x"]})
    assert fields == {"wrong_letters": ["X"]}
    assert validate_progress_payload({"guessed_letters": ["AB"]})[0] is None
    assert validate_progress_payload({})[0] is None


def test_seed_catalog_is_valid():
    assert validate_term_catalog_integrity() is True
    stats = get_catalog_statistics()
    assert stats["total_terms"] == len(TERM_CATALOG)
    for difficulty in Difficulty:
        assert any(term.difficulty == difficulty and term.is_active for term in TERM_CATALOG)
