"""ORM models; importing this package registers every table on ``Base``."""

from casino.models.game import Bonus, Game  # noqa: F401
from casino.models.post import Post  # noqa: F401
from casino.models.user import User  # noqa: F401

__all__ = ["Bonus", "Game", "Post", "User"]
