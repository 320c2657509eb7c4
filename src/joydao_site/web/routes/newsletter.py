# ABOUTME: Newsletter signup procedure.
# ABOUTME: Subscribing an already active email still succeeds.

from fastapi import APIRouter

from joydao_site.models import ActionResult, EmailInput
from joydao_site.web.dependencies import NewsletterSvc

router = APIRouter(prefix="/api/trpc", tags=["newsletter"])


@router.post("/newsletter.subscribe", response_model=ActionResult)
async def subscribe(payload: EmailInput, newsletter: NewsletterSvc):
    """Handle newsletter subscription request."""
    _, already_active = await newsletter.subscribe(payload.email)
    if already_active:
        return ActionResult(success=True, message="Email already subscribed")
    return ActionResult(success=True, message="Successfully subscribed to newsletter")
