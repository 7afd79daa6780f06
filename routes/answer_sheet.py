# routes/answer_sheet.py
"""
In-progress answers for one student assignment and the completeness check run
before they are sent to the backend.
"""
import logging
import os
import time
from typing import Dict, List, Tuple

from dotenv import load_dotenv

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()
DRAFT_MAX_IDLE = float(os.getenv("DRAFT_MAX_IDLE_SECONDS", "86400"))

UNANSWERED = -1


class SubmissionError(Exception):
    """Raised when a set of answers cannot be submitted."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class IncompleteSubmissionError(SubmissionError):
    def __init__(self, total_questions: int, missing: List[int]):
        super().__init__(f"Please answer all {total_questions} questions before submitting.")
        self.total_questions = total_questions
        self.missing = missing


class AssignmentLockedError(SubmissionError):
    def __init__(self):
        super().__init__("Assignment already completed")


class AnswerSheet:
    """Answers keyed by question index; the last answer for an index wins.

    Indices are not range-checked here, only when the sheet is validated.
    """

    def __init__(self):
        self._answers: Dict[int, int] = {}
        self.locked = False

    def set_answer(self, question_index: int, option_index: int) -> None:
        if self.locked:
            raise AssignmentLockedError()
        self._answers[question_index] = option_index

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def answers(self) -> Dict[int, int]:
        return dict(self._answers)


def validate_submission(answers: Dict[int, int], total_questions: int) -> List[int]:
    """Return the answers as a list ordered by question index.

    Every index in range(total_questions) must be present; indices outside
    that range are rejected rather than counted.
    """
    out_of_range = sorted(i for i in answers if i < 0 or i >= total_questions)
    if out_of_range:
        raise SubmissionError(f"Invalid question index: {', '.join(map(str, out_of_range))}")
    missing = [i for i in range(total_questions) if i not in answers]
    if missing:
        raise IncompleteSubmissionError(total_questions, missing)
    return [answers.get(i, UNANSWERED) for i in range(total_questions)]


class DraftStore:
    """Answer sheets owned by each (user, student assignment) pair.

    Sheets untouched for ``max_idle`` seconds are dropped the next time the
    store is used, so abandoned drafts do not pile up for the life of the
    process.
    """

    def __init__(self, max_idle: float = DRAFT_MAX_IDLE, clock=time.monotonic):
        self.max_idle = max_idle
        self.clock = clock
        self._sheets: Dict[Tuple[str, str], AnswerSheet] = {}
        self._touched: Dict[Tuple[str, str], float] = {}

    def __len__(self) -> int:
        return len(self._sheets)

    def _evict_idle(self) -> None:
        cutoff = self.clock() - self.max_idle
        stale = [key for key, touched in self._touched.items() if touched < cutoff]
        for key in stale:
            del self._sheets[key]
            del self._touched[key]
        if stale:
            logger.info(f"Dropped {len(stale)} idle draft(s)")

    def get(self, user_id: str, student_assignment_id: str) -> AnswerSheet:
        self._evict_idle()
        key = (user_id, student_assignment_id)
        if key not in self._sheets:
            self._sheets[key] = AnswerSheet()
        self._touched[key] = self.clock()
        return self._sheets[key]

    def peek(self, user_id: str, student_assignment_id: str) -> Dict[int, int]:
        self._evict_idle()
        sheet = self._sheets.get((user_id, student_assignment_id))
        return sheet.answers if sheet else {}

    def discard(self, user_id: str, student_assignment_id: str) -> None:
        key = (user_id, student_assignment_id)
        self._touched.pop(key, None)
        if self._sheets.pop(key, None) is not None:
            logger.info(f"Discarded draft answers for {student_assignment_id}")


drafts = DraftStore()


def get_drafts() -> DraftStore:
    return drafts
