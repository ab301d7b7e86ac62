"""User queries (composition over the generic Repository)."""

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.repositories.repository import Repository, Row

USERS_TABLE = "user"

_PROFILE_FIELDS = ("user.*", "ranks.name AS ranks", "role.role AS role_name")

_LISTING_FIELDS = (
    "user.id",
    "user.name",
    "user.account",
    "user.email",
    "user.rank_id",
    "user.roleId",
    "user.status",
    "role.role AS access",
    "ranks.name AS ranks",
    "user.last_access",
)


def _with_rank_and_role(repository: Repository, fields):
    return (
        repository.query()
        .select(fields)
        .join("ranks", "ranks.id = user.rank_id", "LEFT")
        .join("role", "role.id = user.roleId", "LEFT")
    )


def find_user_by_id(repository: Repository, user_id: int) -> Row | None:
    """User row plus its rank name and role name."""
    return (
        _with_rank_and_role(repository, _PROFILE_FIELDS)
        .where([("user.id", user_id)])
        .first()
    )


def find_user_by_email(repository: Repository, email: str) -> Row | None:
    return repository.query().where([("email", email)]).first()


def list_users(repository: Repository) -> list[Row]:
    return _with_rank_and_role(repository, _LISTING_FIELDS).order_by(["user.name"]).get()


def touch_last_access(
    repository: Repository,
    user_id: int,
    clock: Clock | None = None,
) -> int:
    """Stamp ``last_access`` with the current time."""
    now = (clock or SystemClock()).now()
    return repository.update_by_id(user_id, {"last_access": now})
