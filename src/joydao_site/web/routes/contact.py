# ABOUTME: Contact form procedure.
# ABOUTME: Public submission; validation errors name the offending field.

from fastapi import APIRouter

from joydao_site.models import ActionResult, ContactMessageCreate
from joydao_site.web.dependencies import ContactSvc

router = APIRouter(prefix="/api/trpc", tags=["contact"])


@router.post("/contact.submit", response_model=ActionResult)
async def submit(payload: ContactMessageCreate, contact: ContactSvc):
    """Handle a contact form submission."""
    await contact.submit(payload)
    return ActionResult(success=True, message="Message sent successfully")
