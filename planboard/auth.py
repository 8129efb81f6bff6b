from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Header

from .config import get_settings
from .errors import Forbidden, Unauthorized

READ = "read"
WRITE = "write"

ROLE_RIGHTS = {
    "user": frozenset({READ, WRITE}),
    "viewer": frozenset({READ}),
}


@dataclass(frozen=True)
class Principal:
    id: str
    role: str


Policy = Callable[[Principal, str], bool]


def role_based_policy(principal: Principal, permission: str) -> bool:
    return permission in ROLE_RIGHTS.get(principal.role, frozenset())


def get_policy() -> Policy:
    """Permission predicate used by every route; override to plug in another one."""
    return role_based_policy


def parse_bearer(authorization: Optional[str]) -> str:
    prefix = "Bearer "
    if not authorization or not authorization.startswith(prefix):
        raise Unauthorized("Please authenticate")
    token = authorization[len(prefix) :].strip()
    if not token:
        raise Unauthorized("Please authenticate")
    return token


def authorize(token: str, permission: str, can: Policy = role_based_policy) -> Principal:
    """Resolve ``token`` to a principal allowed to ``permission``.

    The bearer token is the user identifier. Users listed in READ_ONLY_USERS get the
    viewer role.
    """
    role = "viewer" if token in get_settings().read_only_users else "user"
    principal = Principal(id=token, role=role)
    if not can(principal, permission):
        raise Forbidden("Forbidden")
    return principal


def require(permission: str):
    def dependency(
        authorization: Optional[str] = Header(default=None),
        can: Policy = Depends(get_policy),
    ) -> Principal:
        return authorize(parse_bearer(authorization), permission, can)

    return dependency
