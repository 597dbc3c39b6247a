"""Security façade for rate limiting and caller privilege."""

from .privilege import (  # noqa: F401
    ANONYMOUS,
    STAFF_ROLES,
    AccountStatus,
    Privilege,
    Role,
    privilege_for,
)
from .rate_limit import limiter  # noqa: F401

__all__ = [
    "ANONYMOUS",
    "STAFF_ROLES",
    "AccountStatus",
    "Privilege",
    "Role",
    "limiter",
    "privilege_for",
]
