"""Contact form endpoint."""

from typing import Any

from fastapi import APIRouter, HTTPException
from loguru import logger

from src.leadsite.api.http.schemas import ContactRequest

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("")
def submit_contact_form(payload: ContactRequest) -> dict[str, Any]:
    """Accept a contact form submission.

    Submissions are logged, not stored.
    """
    if not payload.is_complete():
        raise HTTPException(status_code=400, detail="Name, email, and message are required")

    logger.info(
        "Contact form submission received",
        name=payload.name,
        email=payload.email,
        company=payload.company,
        service=payload.service,
    )

    return {
        "success": True,
        "message": "Your message has been submitted. We will review and respond soon.",
    }
