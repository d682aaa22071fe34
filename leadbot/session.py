"""Per-visitor chat session: drives the conversation and lead collection.

Each widget visitor gets a ChatSession that:
  1. Owns the ConversationState and the append-only message list
  2. Classifies every visitor turn (name, greeting, lead answer, free chat)
  3. Forwards free chat to the remote assistant and scans its replies for
     show-property and start-lead triggers
  4. Runs the LeadCollector and hands the finished lead to the
     SubmissionGateway
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Optional, Sequence

from leadbot.backends.base import (
    AssistantBackend,
    AssistantRequest,
    LeadIntake,
    PropertyCatalog,
    RemoteServiceError,
)
from leadbot.classifier import (
    Phase,
    Trigger,
    classify_turn,
    detect_triggers,
    truncate_to_single_question,
)
from leadbot.collector import AnswerStatus, LeadCollector
from leadbot.config import settings
from leadbot.events import SessionEventStream
from leadbot.localization import INTEREST_MESSAGE, localize, resolve_language
from leadbot.models.lead import LeadRecord
from leadbot.models.message import Message
from leadbot.models.state import ConversationPhase, ConversationState
from leadbot.questions import LEAD_QUESTIONS, QuestionDescriptor
from leadbot.scheduler import AsyncioScheduler, Scheduler
from leadbot.submission import SubmissionGateway

log = logging.getLogger("leadbot.session")


def redact_pii(value: str) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


# ── Session registry ─────────────────────────────────────────────

_active_sessions: dict[str, "ChatSession"] = {}


def register_session(session: "ChatSession") -> str:
    """Register a session and return its unique ID."""
    session_id = secrets.token_urlsafe(18)
    session._session_id = session_id
    session._started_at = time.time()
    session._last_activity = session._started_at
    session.events.session_id = session_id
    _active_sessions[session_id] = session
    log.info("Session registered: %s", session_id)
    return session_id


def unregister_session(session_id: str) -> None:
    """Remove a session from the registry."""
    _active_sessions.pop(session_id, None)
    log.info("Session unregistered: %s", session_id)


def get_active_sessions() -> dict[str, "ChatSession"]:
    return _active_sessions


def evict_idle_sessions(max_idle: float, now: float | None = None) -> list[str]:
    """Drop sessions with no visitor activity in the last ``max_idle`` seconds.

    Widgets closed without a DELETE would otherwise stay registered forever.
    Returns the evicted session IDs.
    """
    now = time.time() if now is None else now
    idle = [
        sid for sid, s in _active_sessions.items()
        if now - s.last_activity > max_idle
    ]
    for sid in idle:
        _active_sessions.pop(sid, None)
    if idle:
        log.info("Evicted %d idle session(s)", len(idle))
    return idle


def get_session(session_id: str) -> "ChatSession | None":
    return _active_sessions.get(session_id)


class ChatSession:
    """One visitor's conversation about the listing.

    Typical lifecycle::

        session = ChatSession(assistant=..., intake=..., catalog=...)
        session.start()                 # welcome message
        await session.load_property()

        while session.accepts_input:
            await session.send_message(visitor_text)
            # render session.messages

    Lead prompts arrive after a pacing delay, between calls. Widgets that
    need them promptly subscribe to ``session.events``.
    """

    def __init__(
        self,
        assistant: AssistantBackend,
        intake: LeadIntake,
        catalog: Optional[PropertyCatalog] = None,
        language: str | None = None,
        scheduler: Optional[Scheduler] = None,
        questions: Sequence[QuestionDescriptor] = LEAD_QUESTIONS,
        first_prompt_delay: float | None = None,
        next_prompt_delay: float | None = None,
    ) -> None:
        self._assistant = assistant
        self._catalog = catalog
        self._gateway = SubmissionGateway(intake)
        self._scheduler = scheduler or AsyncioScheduler()
        self._collector = LeadCollector(
            self._scheduler,
            self._emit_lead_prompt,
            questions=questions,
            first_prompt_delay=first_prompt_delay,
            next_prompt_delay=next_prompt_delay,
        )

        # Registry metadata (set by register_session)
        self._session_id: str = ""
        self._started_at: float = 0.0
        self._last_activity: float = time.time()

        self._state = ConversationState(
            language=resolve_language(language or settings.default_language),
        )

        # Rendered conversation: append-only, never reordered
        self._messages: list[Message] = []
        # What the assistant service sees as context; the server may replace it
        self._chat_history: list[Message] = []

        self._busy = False
        self._submission_attempts = 0
        self.events = SessionEventStream(history_size=settings.event_history_size)

    # ── Public API ────────────────────────────────────────────

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def phase(self) -> ConversationPhase:
        return self._state.phase

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def chat_history(self) -> tuple[Message, ...]:
        return tuple(self._chat_history)

    @property
    def is_loading(self) -> bool:
        """True while a remote call is in flight or a lead prompt is pending."""
        return self._busy or self._scheduler.pending > 0

    @property
    def show_property_info(self) -> bool:
        return self._state.show_property_info

    @property
    def lead_submitted(self) -> bool:
        return self._state.lead_submitted

    @property
    def accepts_input(self) -> bool:
        """Whether the widget should let the visitor send a message now."""
        return not self.is_loading and not self._state.lead_submitted

    @property
    def submission_attempts(self) -> int:
        return self._submission_attempts

    @property
    def current_question(self) -> QuestionDescriptor | None:
        return self._collector.current_question(self._state)

    @property
    def last_activity(self) -> float:
        """Wall-clock time of the last visitor turn (or of registration)."""
        return self._last_activity

    @property
    def lead_status(self) -> str:
        """not_started, collecting, submitted or failed."""
        if self._state.lead_submitted:
            return "submitted"
        if self._state.collecting_lead:
            return "collecting"
        if self._submission_attempts:
            return "failed"
        return "not_started"

    def start(self) -> None:
        """INIT → AWAITING_NAME: emit the welcome message."""
        if self._state.phase is not ConversationPhase.INIT:
            return
        welcome = self._append("assistant", localize("welcome", self._state.language))
        self._chat_history = [welcome]
        self._set_phase(ConversationPhase.AWAITING_NAME)
        log.info("Session started: language=%s", self._state.language)

    async def load_property(self) -> None:
        """Fetch the listing once. Failures leave the property unset."""
        if self._catalog is None or self._state.selected_property is not None:
            return
        try:
            snapshot = await self._catalog.fetch()
        except RemoteServiceError as e:
            log.warning("Property catalog unavailable: %s", e)
            return
        if snapshot is None:
            return
        self._state.selected_property = snapshot
        log.info("Property loaded: %s", snapshot.title)
        self._publish_state()

    async def send_message(self, text: str) -> None:
        """Process one visitor turn.

        Appends the turn, classifies it and routes it. Assistant and intake
        failures are turned into localized messages, never raised.
        """
        if not text.strip():
            return

        self._last_activity = time.time()
        previous = list(self._messages)
        user_msg = self._append("user", text)
        self._busy = True
        self._publish_state()
        try:
            await self._handle_turn(user_msg, previous)
        finally:
            self._busy = False
            self._publish_state()

    async def confirm_interest(self) -> None:
        """Same as the visitor typing the fixed "I am interested" turn."""
        await self.send_message(INTEREST_MESSAGE)

    def snapshot(self) -> dict[str, Any]:
        """Everything the widget renders, as JSON-ready data."""
        question = self.current_question
        language = self._state.language
        prop = self._state.selected_property
        return {
            "session_id": self._session_id,
            "phase": self._state.phase.value,
            "language": language,
            "messages": [m.model_dump() for m in self._messages],
            "is_loading": self.is_loading,
            "accepts_input": self.accepts_input,
            "show_property_info": self._state.show_property_info,
            "lead_submitted": self._state.lead_submitted,
            "property": prop.model_dump(by_alias=True) if prop else None,
            "current_question": {
                "field": question.field_key,
                "icon": question.icon,
                "title": question.title(language),
                "description": question.description(language),
            } if question else None,
        }

    def to_dict(self, detail: bool = False) -> dict[str, Any]:
        """Serialize session state for the admin API.

        With detail=False: summary suitable for listing.
        With detail=True: adds lead progress and recent messages.
        """
        d: dict[str, Any] = {
            "session_id": self._session_id,
            "phase": self._state.phase.value,
            "language": self._state.language,
            "started_at": self._started_at,
            "message_count": len(self._messages),
            "last_activity": self._last_activity,
            "lead_status": self.lead_status,
        }
        if detail:
            lead = self._state.lead_record
            d["user_name"] = redact_pii(self._state.user_name)
            d["current_question_index"] = self._state.current_question_index
            d["lead_fields_filled"] = [
                k for k, v in lead.model_dump().items() if v
            ]
            d["submission_attempts"] = self._submission_attempts
            d["recent_messages"] = [m.model_dump() for m in self._messages[-6:]]
        return d

    def lead_summary(self) -> dict[str, Any]:
        """The lead as the admin leads view lists it, with contact details masked."""
        lead = self._state.lead_record
        prop = self._state.selected_property
        return {
            "session_id": self._session_id,
            "status": self.lead_status,
            "name": redact_pii(lead.name or self._state.user_name),
            "phone": redact_pii(lead.phone),
            "fields_filled": [k for k, v in lead.model_dump().items() if v],
            "submission_attempts": self._submission_attempts,
            "property": prop.title if prop else None,
            "language": self._state.language,
        }

    # ── Internal: turn routing ────────────────────────────────

    async def _handle_turn(self, user_msg: Message, previous: list[Message]) -> None:
        text = user_msg.content
        phase = classify_turn(
            text,
            awaiting_name=self._state.phase is ConversationPhase.AWAITING_NAME,
            collecting_lead=self._state.collecting_lead,
            name_reprompted=self._state.name_reprompted,
        )
        log.info("Turn classified: %s", phase.value)

        if phase is Phase.GREETING_REPROMPT:
            self._state.name_reprompted = True
            reply = self._append("assistant", localize("name_prompt", self._state.language))
            self._chat_history.extend([user_msg, reply])
            return

        if phase is Phase.NAME_CAPTURE:
            self._state.user_name = text.strip()
            self._set_phase(ConversationPhase.CONVERSING)
            log.info("Name captured: %s", redact_pii(self._state.user_name))

        elif phase is Phase.LEAD_ANSWER:
            result = self._collector.submit_answer(self._state, text)
            if result.status is AnswerStatus.COMPLETED:
                self._set_phase(ConversationPhase.CONVERSING)
                await self._submit_lead(result.record)
                return
            if result.handled:
                return
            log.info("Lead answer not expected; treating as free chat")

        await self._free_chat(user_msg, previous)

    async def _free_chat(self, user_msg: Message, previous: list[Message]) -> None:
        language = self._state.language
        request = AssistantRequest(
            message=user_msg.content,
            language=language,
            property=self._state.selected_property,
            user_name=self._state.user_name or user_msg.content,
            previous_messages=previous,
            one_question_at_time=True,
        )
        try:
            reply = await self._assistant.chat(request)
        except RemoteServiceError as e:
            log.warning("Assistant call failed: %s", e)
            self._append("assistant", localize("assistant_fallback", language))
            return

        content = truncate_to_single_question(reply.message, language)
        ai_msg = self._append("assistant", content)

        self._chat_history.extend([user_msg, ai_msg])
        if reply.chat_history is not None:
            self._chat_history = list(reply.chat_history)

        self._apply_triggers(detect_triggers(content))

    def _apply_triggers(self, triggers: set[Trigger]) -> None:
        if Trigger.SHOW_PROPERTY in triggers and not self._state.show_property_info:
            self._state.show_property_info = True
            log.info("Assistant requested the property panel")

        if (
            Trigger.START_LEAD in triggers
            and not self._state.collecting_lead
            and not self._state.lead_submitted
        ):
            if self._collector.start(self._state):
                self._set_phase(ConversationPhase.COLLECTING_LEAD)

    # ── Internal: lead submission ─────────────────────────────

    async def _submit_lead(self, record: LeadRecord) -> None:
        if self._state.lead_submitted:
            log.warning("Lead already submitted; duplicate submission skipped")
            return

        self._submission_attempts += 1
        outcome = await self._gateway.submit(
            record,
            list(self._messages),
            self._state.language,
            self._state.selected_property,
        )
        if outcome.succeeded:
            self._state.lead_submitted = True
            self._set_phase(ConversationPhase.COMPLETED)
            log.info("Lead submitted for %s, phone %s",
                     redact_pii(record.name), redact_pii(record.phone))
        self._append("assistant", outcome.message)

    # ── Internal: transcript and events ───────────────────────

    def _append(self, role: str, content: str) -> Message:
        msg = Message(role=role, content=content)
        self._messages.append(msg)
        self.events.publish("message", {
            "index": len(self._messages) - 1,
            "role": msg.role,
            "content": msg.content,
        })
        return msg

    def _emit_lead_prompt(self, text: str) -> None:
        """Scheduler callback: a paced lead question is due."""
        self._append("assistant", text)
        self._publish_state()

    def _set_phase(self, phase: ConversationPhase) -> None:
        if phase is not self._state.phase:
            log.debug("Phase: %s → %s", self._state.phase.value, phase.value)
            self._state.phase = phase

    def _publish_state(self) -> None:
        self.events.publish("state", {
            "phase": self._state.phase.value,
            "is_loading": self.is_loading,
            "accepts_input": self.accepts_input,
            "show_property_info": self._state.show_property_info,
            "lead_submitted": self._state.lead_submitted,
            "collecting_lead": self._state.collecting_lead,
        })
