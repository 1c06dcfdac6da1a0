"""
Webhook Routes
Stripe billing events
"""

import json
import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from clubos.config import settings
from clubos.database import get_db
from clubos.services import billing_service
from clubos.utils.webhook_security import WebhookSignatureError, verify_stripe_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db),
):
    """Verify and apply a Stripe event; unknown event types are acknowledged"""
    payload = await request.body()

    if not stripe_signature or not settings.STRIPE_WEBHOOK_SECRET:
        return JSONResponse(status_code=400, content={"detail": "Missing signature or webhook secret"})

    try:
        verify_stripe_signature(
            payload,
            stripe_signature,
            settings.STRIPE_WEBHOOK_SECRET,
            tolerance=settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS,
        )
        event = json.loads(payload)
    except WebhookSignatureError as e:
        logger.warning(f"Stripe webhook signature verification failed: {str(e)}")
        return JSONResponse(status_code=400, content={"detail": f"Webhook Error: {str(e)}"})
    except ValueError:
        return JSONResponse(status_code=400, content={"detail": "Webhook Error: invalid JSON payload"})

    if not isinstance(event, dict):
        return JSONResponse(status_code=400, content={"detail": "Webhook Error: invalid event payload"})

    try:
        billing_service.process_event(db, event)
    except Exception as e:
        logger.error(f"Stripe webhook handler failed for {event.get('type')}: {str(e)}", exc_info=True)
        db.rollback()
        return JSONResponse(status_code=500, content={"detail": "Webhook handler failed"})

    return {"received": True}
