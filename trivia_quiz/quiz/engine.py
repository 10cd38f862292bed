from __future__ import annotations

import enum
import logging
from typing import Dict, Optional

from .. import config
from .ingest import QuestionBank
from .parser import Question
from .scheduler import Handle, Scheduler, TickScheduler
from .utils import option_letter

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    START = "start"
    IN_PROGRESS = "in_progress"
    REVEALING = "revealing"
    RESULT = "result"


class CelebrationTier(str, enum.Enum):
    TOP = "top"
    MID = "mid"
    LOW = "low"


def celebration_tier(score: int, total: int) -> CelebrationTier:
    ratio = score / total if total else 0.0
    if ratio >= config.TOP_TIER_RATIO:
        return CelebrationTier.TOP
    if ratio >= config.MID_TIER_RATIO:
        return CelebrationTier.MID
    return CelebrationTier.LOW


class QuizSession:
    """Start -> quiz -> result progression over a loaded question bank.

    Selecting an option locks the question and schedules the advance to the
    next one; any reset cancels that pending advance.
    """

    def __init__(
        self,
        bank: QuestionBank,
        scheduler: Optional[Scheduler] = None,
        advance_delay: float = config.ADVANCE_DELAY_SECONDS,
    ) -> None:
        self.bank = bank
        self.scheduler = scheduler or TickScheduler()
        self.advance_delay = advance_delay

        self.phase = Phase.START
        self.current_index = 0
        self.score = 0
        self.selected_option: Optional[int] = None
        self.tier: Optional[CelebrationTier] = None
        self._pending_advance: Optional[Handle] = None

    @property
    def total(self) -> int:
        return len(self.bank)

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase not in (Phase.IN_PROGRESS, Phase.REVEALING):
            return None
        if self.current_index >= self.total:
            return None
        return self.bank.questions[self.current_index]

    @property
    def progress(self) -> float:
        return self.current_index / self.total if self.total else 0.0

    @property
    def ratio(self) -> float:
        return self.score / self.total if self.total else 0.0

    def _cancel_pending(self) -> None:
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None

    def _clear(self) -> None:
        self._cancel_pending()
        self.current_index = 0
        self.score = 0
        self.selected_option = None
        self.tier = None

    def start(self) -> bool:
        if self.phase is not Phase.START:
            return False
        if self.bank.fault is not None:
            self.bank.log("Cannot start the quiz: loading the questions failed")
            return False

        if self.bank.is_empty:
            self.bank.recover()
        if self.bank.is_empty:
            self.bank.log("Cannot start the quiz: the question bank is empty")
            logger.warning("Start requested with an empty question bank")
            return False

        self._clear()
        self.phase = Phase.IN_PROGRESS
        self.bank.log("Quiz started")
        return True

    def select_option(self, index: int) -> bool:
        """Lock in an answer for the current question.

        Returns False, changing nothing, when the question is already
        answered or no question is showing.
        """

        if self.phase is not Phase.IN_PROGRESS:
            return False
        if not 0 <= index < len(config.ANSWER_LETTERS):
            return False
        question = self.current_question
        if question is None:
            return False

        self.selected_option = index
        if option_letter(index) == question.answer:
            self.score += 1
        self.phase = Phase.REVEALING
        self._pending_advance = self.scheduler.call_later(self.advance_delay, self.advance)
        return True

    def advance(self) -> bool:
        if self.phase is not Phase.REVEALING:
            return False

        self._cancel_pending()
        self.current_index += 1
        self.selected_option = None
        if self.current_index >= self.total:
            self.current_index = self.total
            self.phase = Phase.RESULT
            self.tier = celebration_tier(self.score, self.total)
            logger.info("Quiz finished: %d/%d (%s)", self.score, self.total, self.tier.value)
        else:
            self.phase = Phase.IN_PROGRESS
        return True

    def acknowledge_result(self) -> bool:
        if self.phase is not Phase.RESULT:
            return False
        self.reset()
        return True

    def reset(self) -> None:
        self._clear()
        self.phase = Phase.START
        self.bank.log("Quiz reset")

    def is_correct(self, index: int) -> bool:
        question = self.current_question
        return question is not None and option_letter(index) == question.answer

    def to_payload(self) -> Dict[str, object]:
        question = self.current_question
        return {
            "phase": self.phase.value,
            "current_index": self.current_index,
            "total": self.total,
            "score": self.score,
            "selected_option": self.selected_option,
            "question": question.to_dict() if question else None,
            "tier": self.tier.value if self.tier else None,
        }
