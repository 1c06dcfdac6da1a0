"""
Chat Service
Bounded tool-calling loop between a member's chat turn and the chat-completion provider
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from clubos.exceptions import ClubError, Timeout, UpstreamFailure
from clubos.models.event import ClubEvent, EventRsvp, RsvpStatus
from clubos.services import event_service
from clubos.services.llm_client import ChatCompletionClient
from clubos.services.member_service import MemberContext

logger = logging.getLogger(__name__)

MAX_TOOL_ROUNDS = 3
UPCOMING_EVENTS_LIMIT = 10

FALLBACK_MESSAGE = "I'm having trouble completing that request."
APOLOGY_MESSAGE = "Sorry, something went wrong. Please try again."
NO_RESPONSE_MESSAGE = "I couldn't generate a response."
NOT_CONFIGURED_MESSAGE = (
    "The AI assistant is not yet configured. Please add your LLM_API_KEY to the "
    "environment variables to enable this feature."
)


class ChatTool(str, enum.Enum):
    """Functions the assistant may call"""

    GET_UPCOMING_EVENTS = "get_upcoming_events"
    RSVP_TO_EVENT = "rsvp_to_event"
    GET_MY_RSVPS = "get_my_rsvps"
    CANCEL_RSVP = "cancel_rsvp"


TOOL_SCHEMAS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": ChatTool.GET_UPCOMING_EVENTS.value,
            "description": "List the club's upcoming published events",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": ChatTool.RSVP_TO_EVENT.value,
            "description": (
                "RSVP the member as attending an upcoming event. If several events match, "
                "ask the member which one they meant and call again with its event_id."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "event_title": {
                        "type": "string",
                        "description": "Full or partial event title",
                    },
                    "event_id": {
                        "type": "string",
                        "description": "Exact event id, when known from a previous result",
                    },
                    "guest_count": {
                        "type": "integer",
                        "description": "Number of guests the member is bringing (0-10)",
                    },
                },
                "required": ["event_title"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ChatTool.GET_MY_RSVPS.value,
            "description": "List the upcoming events the member is attending",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": ChatTool.CANCEL_RSVP.value,
            "description": "Cancel the member's RSVP to an event they are attending",
            "parameters": {
                "type": "object",
                "properties": {
                    "event_title": {
                        "type": "string",
                        "description": "Full or partial event title",
                    },
                    "event_id": {
                        "type": "string",
                        "description": "Exact event id, when known from a previous result",
                    },
                },
                "required": ["event_title"],
            },
        },
    },
]


@dataclass
class ChatContext:
    """Per-turn context handed to every tool handler; the member is resolved once per request"""

    db: Session
    member: MemberContext


@dataclass
class ToolOutcome:
    """What a tool returns to the model, plus cards for the client to render"""

    result: Any
    attachments: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ChatTurnResult:
    message: str
    attachments: List[Dict[str, Any]] = field(default_factory=list)


EVENT_SUMMARY_FIELDS = ("id", "title", "description", "location", "start_date", "end_date", "capacity", "price")


def _event_summary(event: ClubEvent) -> Dict[str, Any]:
    return {name: getattr(event, name) for name in EVENT_SUMMARY_FIELDS}


def _attachment(kind: str, events: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": kind, "events": events}


def _disambiguation(ctx: ChatContext, title: str, candidates: List[ClubEvent]) -> ToolOutcome:
    """Several events match: list them instead of guessing"""
    return ToolOutcome(
        result={
            "disambiguation": True,
            "message": f'Several events match "{title}". Ask the member which one they mean.',
            "candidates": [
                {"event_id": event.id, "title": event.title, "start_date": event.start_date} for event in candidates
            ],
        },
        attachments=[
            _attachment(
                "event_choices",
                [event_service.enrich_event(ctx.db, event, ctx.member.member_id) for event in candidates],
            )
        ],
    )


def _parse_event_id(value: Any) -> Optional[UUID]:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _attending_event_ids(ctx: ChatContext) -> List[UUID]:
    rows = (
        ctx.db.query(EventRsvp.event_id)
        .filter(EventRsvp.member_id == ctx.member.member_id, EventRsvp.status == RsvpStatus.ATTENDING)
        .all()
    )
    return [row.event_id for row in rows]


def handle_get_upcoming_events(ctx: ChatContext) -> ToolOutcome:
    events = event_service.list_upcoming_events(ctx.db, ctx.member, limit=UPCOMING_EVENTS_LIMIT)

    if not events:
        return ToolOutcome(result=[])

    summaries = [{name: event[name] for name in EVENT_SUMMARY_FIELDS} for event in events]
    return ToolOutcome(result=summaries, attachments=[_attachment("event_list", events)])


def handle_rsvp_to_event(ctx: ChatContext, args: Dict[str, Any]) -> ToolOutcome:
    title = str(args.get("event_title") or "").strip()
    event_id = _parse_event_id(args.get("event_id"))
    guest_count = args.get("guest_count", 0) or 0

    if event_id:
        candidates = (
            event_service.upcoming_events_query(ctx.db, ctx.member.club_id).filter(ClubEvent.id == event_id).all()
        )
    else:
        candidates = event_service.find_events_by_title(ctx.db, ctx.member, title)

    if not candidates:
        return ToolOutcome(result={"error": f'No upcoming event found matching "{title}".'})

    if len(candidates) > 1:
        return _disambiguation(ctx, title, candidates)

    event = candidates[0]
    try:
        event_service.upsert_rsvp(ctx.db, ctx.member, event.id, RsvpStatus.ATTENDING, guest_count)
    except ClubError as e:
        return ToolOutcome(result={"error": f'Could not RSVP to "{event.title}": {e.detail}'})

    card = event_service.enrich_event(ctx.db, event, ctx.member.member_id)
    return ToolOutcome(
        result={"success": True, "event_title": event.title, "status": RsvpStatus.ATTENDING.value},
        attachments=[_attachment("event_list", [card])],
    )


def handle_get_my_rsvps(ctx: ChatContext) -> ToolOutcome:
    event_ids = _attending_event_ids(ctx)
    if not event_ids:
        return ToolOutcome(result=[])

    events = event_service.upcoming_events_query(ctx.db, ctx.member.club_id).filter(ClubEvent.id.in_(event_ids)).all()
    if not events:
        return ToolOutcome(result=[])

    cards = [event_service.enrich_event(ctx.db, event, ctx.member.member_id) for event in events]
    return ToolOutcome(
        result=[_event_summary(event) for event in events],
        attachments=[_attachment("event_list", cards)],
    )


def handle_cancel_rsvp(ctx: ChatContext, args: Dict[str, Any]) -> ToolOutcome:
    title = str(args.get("event_title") or "").strip()
    event_id = _parse_event_id(args.get("event_id"))

    event_ids = _attending_event_ids(ctx)
    if not event_ids:
        return ToolOutcome(result={"error": "You don't have any active RSVPs."})

    if event_id:
        candidates = [
            event
            for event in ctx.db.query(ClubEvent)
            .filter(ClubEvent.id == event_id, ClubEvent.club_id == ctx.member.club_id)
            .all()
            if event.id in event_ids
        ]
    else:
        candidates = event_service.find_events_by_title(
            ctx.db, ctx.member, title, event_ids=event_ids, upcoming_only=False
        )

    if not candidates:
        return ToolOutcome(result={"error": f'No active RSVP found matching "{title}".'})

    if len(candidates) > 1:
        return _disambiguation(ctx, title, candidates)

    event = candidates[0]
    try:
        event_service.upsert_rsvp(ctx.db, ctx.member, event.id, RsvpStatus.DECLINED)
    except ClubError as e:
        return ToolOutcome(result={"error": f'Could not cancel RSVP to "{event.title}": {e.detail}'})

    card = event_service.enrich_event(ctx.db, event, ctx.member.member_id)
    return ToolOutcome(
        result={"success": True, "event_title": event.title, "status": RsvpStatus.DECLINED.value},
        attachments=[_attachment("event_cancel", [card])],
    )


def dispatch_tool(ctx: ChatContext, name: str, args: Dict[str, Any]) -> ToolOutcome:
    """Route one model-issued function call to its handler"""
    try:
        tool = ChatTool(name)
    except ValueError:
        return ToolOutcome(result={"error": f"Unknown tool: {name}"})

    if tool is ChatTool.GET_UPCOMING_EVENTS:
        return handle_get_upcoming_events(ctx)
    elif tool is ChatTool.RSVP_TO_EVENT:
        return handle_rsvp_to_event(ctx, args)
    elif tool is ChatTool.GET_MY_RSVPS:
        return handle_get_my_rsvps(ctx)
    elif tool is ChatTool.CANCEL_RSVP:
        return handle_cancel_rsvp(ctx, args)

    raise ValueError(f"Chat tool without a handler: {tool.value}")


def _parse_arguments(raw: Any) -> Optional[Dict[str, Any]]:
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def build_system_prompt(ctx: ChatContext) -> str:
    """System prompt for the assistant"""
    member = ctx.member.member
    today = datetime.utcnow().strftime("%A, %Y-%m-%d")

    return f"""
    You are ClubOS Assistant, an AI helper for country club members and staff.
    You are talking to {member.first_name} {member.last_name}. Today is {today} (UTC).

    You can list upcoming club events, RSVP the member to an event, show the events
    they are attending, and cancel their RSVPs. Use the tools for anything about events;
    never invent events or RSVP results. If a tool reports several matching events,
    ask the member which one they mean.

    Be friendly, concise, and helpful.
    """.strip()


async def run_chat_turn(
    ctx: ChatContext,
    history: List[Dict[str, str]],
    client: Optional[ChatCompletionClient] = None,
) -> ChatTurnResult:
    """
    Answer one chat turn, letting the model call tools for up to MAX_TOOL_ROUNDS round-trips

    Provider failures degrade to an apology; exhausting the rounds without a
    text answer returns FALLBACK_MESSAGE.
    """
    client = client or ChatCompletionClient()

    if not client.is_configured:
        return ChatTurnResult(message=NOT_CONFIGURED_MESSAGE)

    messages: List[Dict[str, Any]] = [{"role": "system", "content": build_system_prompt(ctx)}]
    messages.extend({"role": message["role"], "content": message["content"]} for message in history)

    attachments: List[Dict[str, Any]] = []

    try:
        for _ in range(MAX_TOOL_ROUNDS):
            reply = await client.complete(messages, tools=TOOL_SCHEMAS)
            tool_calls = reply.get("tool_calls") or []

            if not tool_calls:
                return ChatTurnResult(message=reply.get("content") or NO_RESPONSE_MESSAGE, attachments=attachments)

            messages.append({"role": "assistant", "content": reply.get("content"), "tool_calls": tool_calls})

            for tool_call in tool_calls:
                function = tool_call.get("function") or {}
                name = function.get("name", "")
                args = _parse_arguments(function.get("arguments"))

                if args is None:
                    outcome = ToolOutcome(result={"error": f"Invalid arguments for {name}"})
                else:
                    logger.info(f"Chat tool call: {name} member={ctx.member.member_id}")
                    outcome = dispatch_tool(ctx, name, args)

                attachments.extend(outcome.attachments)
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": tool_call.get("id"),
                        "content": json.dumps(outcome.result, default=str),
                    }
                )
    except (Timeout, UpstreamFailure) as e:
        logger.warning(f"Chat provider failure, replying with apology: {e.detail}")
        return ChatTurnResult(message=APOLOGY_MESSAGE)

    logger.warning(f"Chat turn hit the {MAX_TOOL_ROUNDS}-round limit for member {ctx.member.member_id}")
    return ChatTurnResult(message=FALLBACK_MESSAGE, attachments=attachments)
