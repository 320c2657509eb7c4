# ABOUTME: Caller identity resolution and the owner (admin) check.
# ABOUTME: The only place that compares a caller against the configured owner identity.

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

from joydao_site.errors import Forbidden, Unauthorized, ValidationFailed
from joydao_site.models import OPEN_ID_MAX_LENGTH, Role

log = structlog.get_logger()


@dataclass(frozen=True)
class Anonymous:
    """Caller without an identity header."""


@dataclass(frozen=True)
class Authenticated:
    """Caller identified by an opaque token.

    The role is never taken from the request; admin rights come only from
    ``is_owner``.
    """

    open_id: str
    role: Role = Role.USER


Caller = Anonymous | Authenticated


def resolve_caller(headers: Mapping[str, str], header_names: Iterable[str]) -> Caller:
    """Derive the caller from the first non-empty identity header.

    Raises:
        ValidationFailed: The token is longer than a stored identity can be.
    """
    for name in header_names:
        value = (headers.get(name) or "").strip()
        if len(value) > OPEN_ID_MAX_LENGTH:
            log.warning("identity_token_too_long", header=name, length=len(value))
            raise ValidationFailed("Identity token too long")
        if value:
            return Authenticated(open_id=value)
    return Anonymous()


def is_owner(caller: Caller, owner_open_id: str) -> bool:
    """Exact, case-sensitive match against the owner identity key."""
    return (
        isinstance(caller, Authenticated)
        and bool(owner_open_id)
        and caller.open_id == owner_open_id
    )


def require_user(caller: Caller) -> Authenticated:
    if not isinstance(caller, Authenticated):
        raise Unauthorized()
    return caller


def require_admin(caller: Caller, owner_open_id: str) -> Authenticated:
    """Return the caller if they are the owner, otherwise raise.

    Raises:
        Unauthorized: Caller is anonymous.
        Forbidden: Caller is signed in but is not the owner.
    """
    user = require_user(caller)
    if not is_owner(user, owner_open_id):
        log.warning("admin_access_denied", open_id=user.open_id)
        raise Forbidden()
    return user
