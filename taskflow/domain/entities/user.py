"""Domain entity representing a user."""

from dataclasses import dataclass


@dataclass
class User:
    """Attributes of a user that the notification system needs."""

    id: int | None
    name: str
    email: str
    avatar_url: str | None = None
    is_active: bool = True
