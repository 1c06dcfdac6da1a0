"""
Chat API Routes
Member-facing AI assistant
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from clubos.database import get_db
from clubos.dependencies.auth import get_current_user_id, parse_club_header
from clubos.exceptions import NotFound
from clubos.schemas.chat import ChatRequest, ChatResponse
from clubos.services import chat_service
from clubos.services.llm_client import ChatCompletionClient
from clubos.services.member_service import resolve_member

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])

NO_MEMBER_MESSAGE = "Your account isn't linked to a club membership yet. Please contact your club office."


def get_chat_client() -> ChatCompletionClient:
    return ChatCompletionClient()


@router.post("", response_model=ChatResponse)
async def chat(
    chat_request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    x_club_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    client: ChatCompletionClient = Depends(get_chat_client),
):
    """
    Run one assistant turn

    Failures after authentication degrade to a 200 reply so the chat UI can
    show them inline. A malformed X-Club-Id is still a 400.
    """
    club_id = parse_club_header(x_club_id)

    try:
        member_ctx = resolve_member(db, user_id, club_id)
    except NotFound:
        return ChatResponse(message=NO_MEMBER_MESSAGE)

    ctx = chat_service.ChatContext(db=db, member=member_ctx)
    history = [message.model_dump() for message in chat_request.messages]

    try:
        result = await chat_service.run_chat_turn(ctx, history, client)
    except Exception as e:
        logger.exception(f"Chat turn failed for member {member_ctx.member_id}: {str(e)}")
        db.rollback()
        return ChatResponse(message=chat_service.APOLOGY_MESSAGE)

    return {"message": result.message, "attachments": result.attachments}
