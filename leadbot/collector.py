"""Lead collector: walks a visitor through the qualification questions.

The collector holds no conversation state of its own. Its position
(IDLE, ASKING(i), DONE) is read from and written to the ConversationState
the session passes in:

    IDLE       collecting_lead False, current_question_index None
    ASKING(i)  collecting_lead True,  current_question_index i
    DONE       collection finished; indistinguishable from IDLE afterwards

Prompts are not returned to the caller. They are emitted through the
``emit`` callback after a pacing delay, via the Scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from leadbot.config import settings
from leadbot.models.lead import LeadRecord
from leadbot.models.state import ConversationState
from leadbot.questions import LEAD_QUESTIONS, QuestionDescriptor
from leadbot.scheduler import Scheduler

log = logging.getLogger("leadbot.collector")


class AnswerStatus(str, Enum):
    NOT_HANDLED = "not_handled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AnswerResult:
    status: AnswerStatus
    # Set only when status is COMPLETED
    record: Optional[LeadRecord] = None

    @property
    def handled(self) -> bool:
        return self.status is not AnswerStatus.NOT_HANDLED


class LeadCollector:
    """Sequences the qualification questions for one session."""

    def __init__(
        self,
        scheduler: Scheduler,
        emit: Callable[[str], None],
        questions: Sequence[QuestionDescriptor] = LEAD_QUESTIONS,
        first_prompt_delay: float | None = None,
        next_prompt_delay: float | None = None,
    ) -> None:
        if not questions:
            raise ValueError("LeadCollector needs at least one question")
        self._scheduler = scheduler
        self._emit = emit
        self._questions = tuple(questions)
        self._first_delay = (
            settings.lead_first_prompt_delay if first_prompt_delay is None else first_prompt_delay
        )
        self._next_delay = (
            settings.lead_next_prompt_delay if next_prompt_delay is None else next_prompt_delay
        )

    @property
    def questions(self) -> tuple[QuestionDescriptor, ...]:
        return self._questions

    @staticmethod
    def is_asking(state: ConversationState) -> bool:
        return state.collecting_lead and state.current_question_index is not None

    def current_question(self, state: ConversationState) -> QuestionDescriptor | None:
        if not self.is_asking(state):
            return None
        return self._questions[state.current_question_index]

    def start(self, state: ConversationState) -> bool:
        """IDLE → ASKING(0). Returns False if a run is already in progress."""
        if self.is_asking(state):
            log.warning("Lead collection already in progress; start ignored")
            return False

        state.collecting_lead = True
        state.current_question_index = 0
        state.lead_record = LeadRecord(name=state.user_name)
        log.info("Lead collection started (%d questions)", len(self._questions))

        self._schedule_prompt(state, 0, self._first_delay)
        return True

    def submit_answer(self, state: ConversationState, text: str) -> AnswerResult:
        """Record ``text`` as the answer to the current question."""
        if not self.is_asking(state):
            return AnswerResult(AnswerStatus.NOT_HANDLED)

        index = state.current_question_index
        question = self._questions[index]
        setattr(state.lead_record, question.field_key, text)
        log.info("Lead answer recorded: %s (%d/%d)",
                 question.field_key, index + 1, len(self._questions))

        if index == len(self._questions) - 1:
            state.collecting_lead = False
            state.current_question_index = None
            log.info("Lead collection complete")
            return AnswerResult(
                AnswerStatus.COMPLETED,
                record=state.lead_record.model_copy(),
            )

        state.current_question_index = index + 1
        self._schedule_prompt(state, index + 1, self._next_delay)
        return AnswerResult(AnswerStatus.IN_PROGRESS)

    # ── Internal ──────────────────────────────────────────────

    def _schedule_prompt(self, state: ConversationState, index: int, delay: float) -> None:
        # Rendered at schedule time, not at emission time
        text = self._questions[index].prompt(state.user_name, state.language)
        self._scheduler.call_later(delay, lambda: self._emit(text))
