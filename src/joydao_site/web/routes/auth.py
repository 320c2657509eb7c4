# ABOUTME: Auth procedures for the current caller and sign-out.
# ABOUTME: auth.me upserts the signed-in user; auth.logout clears the session cookie.

from fastapi import APIRouter, Response

from joydao_site.identity import Authenticated
from joydao_site.models import ActionResult, UserRecord
from joydao_site.web.dependencies import AppSettings, CurrentCaller, UserSvc

router = APIRouter(prefix="/api/trpc", tags=["auth"])


@router.get("/auth.me", response_model=UserRecord | None)
async def me(caller: CurrentCaller, users: UserSvc):
    """Return the signed-in user, or null for anonymous callers."""
    if not isinstance(caller, Authenticated):
        return None
    return await users.sign_in(caller)


@router.post("/auth.logout", response_model=ActionResult, response_model_exclude_none=True)
async def logout(response: Response, settings: AppSettings):
    response.delete_cookie(
        settings.session_cookie_name, path="/", httponly=True, samesite="lax"
    )
    return ActionResult(success=True)
