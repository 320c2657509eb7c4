# ABOUTME: Tests for caller resolution and the owner check.
# ABOUTME: Covers anonymous, signed-in and owner callers across header variants.

import pytest

from joydao_site.errors import Forbidden, Unauthorized, ValidationFailed
from joydao_site.identity import (
    Anonymous,
    Authenticated,
    is_owner,
    require_admin,
    require_user,
    resolve_caller,
)
from joydao_site.models import OPEN_ID_MAX_LENGTH, Role

HEADERS = ["x-openid", "x-open-id"]


class TestResolveCaller:
    """Tests for resolve_caller."""

    def test_no_header_is_anonymous(self) -> None:
        assert resolve_caller({}, HEADERS) == Anonymous()

    def test_blank_header_is_anonymous(self) -> None:
        """Whitespace-only tokens do not identify anyone."""
        assert resolve_caller({"x-openid": "   "}, HEADERS) == Anonymous()

    def test_primary_header(self) -> None:
        caller = resolve_caller({"x-openid": "abc"}, HEADERS)
        assert caller == Authenticated(open_id="abc")
        assert caller.role == Role.USER

    def test_alternate_header(self) -> None:
        assert resolve_caller({"x-open-id": "abc"}, HEADERS) == Authenticated(open_id="abc")

    def test_first_header_wins(self) -> None:
        caller = resolve_caller({"x-openid": "first", "x-open-id": "second"}, HEADERS)
        assert caller == Authenticated(open_id="first")

    def test_token_is_stripped(self) -> None:
        assert resolve_caller({"x-openid": " abc "}, HEADERS) == Authenticated(open_id="abc")

    def test_token_at_column_width_accepted(self) -> None:
        token = "a" * OPEN_ID_MAX_LENGTH
        assert resolve_caller({"x-openid": token}, HEADERS) == Authenticated(open_id=token)

    def test_overlong_token_rejected(self) -> None:
        """Tokens that cannot be stored are a validation error, not a server fault."""
        with pytest.raises(ValidationFailed) as exc_info:
            resolve_caller({"x-openid": "a" * (OPEN_ID_MAX_LENGTH + 1)}, HEADERS)
        assert exc_info.value.http_status == 400
        assert exc_info.value.message == "Identity token too long"


class TestOwnerCheck:
    """Tests for is_owner, require_user and require_admin."""

    def test_owner_matches_exactly(self) -> None:
        assert is_owner(Authenticated(open_id="owner"), "owner") is True

    def test_owner_check_is_case_sensitive(self) -> None:
        assert is_owner(Authenticated(open_id="Owner"), "owner") is False

    def test_anonymous_is_never_owner(self) -> None:
        assert is_owner(Anonymous(), "owner") is False

    def test_empty_owner_matches_nobody(self) -> None:
        """An unset owner key must not grant admin to anyone."""
        assert is_owner(Authenticated(open_id=""), "") is False

    def test_require_user_rejects_anonymous(self) -> None:
        with pytest.raises(Unauthorized) as exc_info:
            require_user(Anonymous())
        assert exc_info.value.http_status == 401
        assert exc_info.value.message == "Please login"

    def test_require_admin_rejects_anonymous_with_401(self) -> None:
        with pytest.raises(Unauthorized) as exc_info:
            require_admin(Anonymous(), "owner")
        assert not isinstance(exc_info.value, Forbidden)

    def test_require_admin_rejects_non_owner_with_403(self) -> None:
        with pytest.raises(Forbidden) as exc_info:
            require_admin(Authenticated(open_id="visitor"), "owner")
        assert exc_info.value.http_status == 403
        assert exc_info.value.message == "Unauthorized: Admin access only"

    def test_require_admin_returns_owner(self) -> None:
        caller = Authenticated(open_id="owner")
        assert require_admin(caller, "owner") is caller
