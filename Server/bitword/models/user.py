"""
User Data Models

The optional player identity used as part of every game and stats lookup key.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Anonymous:
    """The default, unidentified player."""

    @property
    def user_id(self) -> Optional[int]:
        return None

    @property
    def storage_key(self) -> str:
        return "anonymous"


@dataclass(frozen=True)
class RegisteredUser:
    """A player identified by a numeric user id."""
    id: int

    @property
    def user_id(self) -> Optional[int]:
        return self.id

    @property
    def storage_key(self) -> str:
        return f"user:{self.id}"


UserKey = Union[Anonymous, RegisteredUser]

ANONYMOUS: UserKey = Anonymous()


def user_key_from_id(user_id: Optional[int]) -> UserKey:
    """Convert an optional numeric user id into a UserKey."""
    if user_id is None:
        return ANONYMOUS
    return RegisteredUser(int(user_id))
