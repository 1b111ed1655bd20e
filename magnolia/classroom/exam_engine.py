"""
ExamEngine - Score exams, enforce attempt limits, run timed sessions.

Provides:
- calculate_score: whole-question scoring against an exam's answer key
- ExamEngine: start/submit flow with attempt-cap enforcement
- ExamSession: an in-progress attempt with its countdown
"""

import asyncio
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from magnolia.errors import AttemptLimitError, InvalidInputError
from magnolia.repositories import AttemptRepository, ExamRepository, validation_message
from magnolia.schemas import Answer, Exam, ExamAttempt, ExamQuestion, ScoreResult
from magnolia.utils.clock import Clock

from .completion import CompletionEvaluator
from .progress import ProgressTracker


logger = logging.getLogger(__name__)

ANSWER_ADAPTER = TypeAdapter(Answer)


# -----------------------------------------------------------------------------
# Scoring
# -----------------------------------------------------------------------------

def normalize_answer(value: str) -> str:
    return value.strip().lower()


def is_answer_correct(question: ExamQuestion, given: Any) -> bool:
    """
    Compare a submitted answer with the question's key.

    Single answers match case-insensitively after trimming. Multi-answer
    keys need a list whose normalized set equals the key's set exactly.
    """
    correct = question.correct_answer
    if isinstance(correct, list):
        if not isinstance(given, list):
            return False
        return {normalize_answer(str(a)) for a in given} == {normalize_answer(a) for a in correct}
    return isinstance(given, str) and normalize_answer(given) == normalize_answer(correct)


def calculate_score(exam: Exam, answers: dict[str, Answer]) -> ScoreResult:
    """
    Score a set of answers.

    Args:
        exam: Exam with questions and passing score
        answers: Question ID -> submitted answer; missing answers score zero

    Returns:
        ScoreResult with the rounded percentage and pass flag
    """
    total = 0.0
    earned = 0.0
    for question in exam.questions:
        total += question.points
        if is_answer_correct(question, answers.get(question.id)):
            earned += question.points

    # Half-up rounding; round() would send 62.5 to 62
    score = math.floor(earned / total * 100 + 0.5) if total > 0 else 0
    # Full marks only for a perfect sheet
    if earned < total:
        score = min(score, 99)
    return ScoreResult(
        score=score,
        passed=score >= exam.passing_score,
        earned_points=earned,
        total_points=total,
    )


# -----------------------------------------------------------------------------
# Sessions
# -----------------------------------------------------------------------------

class ExamSession:
    """
    An attempt in progress.

    Timed exams get a deadline of time_limit minutes from the start; once it
    passes, the current answers are submitted exactly as a manual submit.
    """

    def __init__(self, engine: "ExamEngine", exam: Exam, attempt: ExamAttempt):
        self.engine = engine
        self.exam = exam
        self.attempt = attempt
        self.answers: dict[str, Answer] = {}
        self.result: Optional[ExamAttempt] = None
        started = datetime.fromisoformat(attempt.started_at)
        self.deadline = (
            started + timedelta(minutes=exam.time_limit) if exam.time_limit else None
        )

    @property
    def submitted(self) -> bool:
        return self.result is not None

    def answer(self, question_id: str, value: Answer):
        """
        Record an answer, replacing any earlier one for the question.

        Raises:
            InvalidInputError: If value is not a string or a list of strings
        """
        if self.submitted:
            raise RuntimeError("Attempt already submitted")
        try:
            self.answers[question_id] = ANSWER_ADAPTER.validate_python(value)
        except ValidationError as e:
            raise InvalidInputError(
                f"Answers must be text or a list of text options (question {question_id})"
            ) from e

    def time_remaining(self) -> Optional[int]:
        """Whole seconds left, or None for untimed exams."""
        if self.deadline is None:
            return None
        left = (self.deadline - self.engine.clock()).total_seconds()
        return max(0, math.ceil(left))

    def submit(self) -> ExamAttempt:
        """Score and persist the attempt. Submitting again returns the same result."""
        if self.result is None:
            self.result = self.engine.submit_attempt(self.exam, self.attempt, self.answers)
        return self.result

    def check_timer(self) -> Optional[ExamAttempt]:
        """Auto-submit if time has run out. Returns the result when submitted."""
        if self.submitted:
            return self.result
        remaining = self.time_remaining()
        if remaining is not None and remaining <= 0:
            logger.info(f"Time up on attempt {self.attempt.id}, auto-submitting")
            return self.submit()
        return None

    async def run_countdown(self, tick: float = 1.0) -> ExamAttempt:
        """Wait for the deadline (or a manual submit) and return the result."""
        if self.deadline is None:
            raise ValueError("Exam has no time limit")
        while not self.submitted:
            remaining = self.time_remaining()
            if remaining <= 0:
                return self.submit()
            await asyncio.sleep(min(tick, remaining))
        return self.result


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

class ExamEngine:
    """Start and submit exams, feeding passes into course progress."""

    def __init__(
        self,
        exams: ExamRepository,
        attempts: AttemptRepository,
        progress: ProgressTracker,
        evaluator: Optional[CompletionEvaluator] = None,
        clock: Clock = datetime.now,
    ):
        self.exams = exams
        self.attempts = attempts
        self.progress = progress
        self.evaluator = evaluator
        self.clock = clock

    def attempts_used(self, user_id: str, exam_id: str) -> int:
        """Completed attempts only; in-progress ones do not count."""
        return self.attempts.count_completed(user_id, exam_id)

    def can_start(self, user_id: str, exam: Exam) -> bool:
        if exam.attempts_allowed is None:
            return True
        return self.attempts_used(user_id, exam.id) < exam.attempts_allowed

    def start_exam(self, user_id: str, exam_id: str) -> Optional[ExamSession]:
        """
        Begin a new attempt.

        Returns:
            The session, or None if the exam does not exist

        Raises:
            AttemptLimitError: If the user has no attempts left
        """
        exam = self.exams.get(exam_id)
        if exam is None:
            return None
        if not self.can_start(user_id, exam):
            raise AttemptLimitError(exam.id, exam.attempts_allowed)

        attempt = ExamAttempt(
            id=self.attempts.new_attempt_id(),
            exam_id=exam.id,
            user_id=user_id,
            started_at=self.clock().isoformat(),
        )
        return ExamSession(self, exam, attempt)

    def submit_attempt(self, exam: Exam, attempt: ExamAttempt, answers: dict[str, Answer]) -> ExamAttempt:
        """Score, append to the attempt log, and record a pass against the course."""
        result = calculate_score(exam, answers)
        try:
            completed = ExamAttempt.model_validate({
                **attempt.model_dump(),
                "answers": dict(answers),
                "score": result.score,
                "passed": result.passed,
                "completed_at": self.clock().isoformat(),
            })
        except ValidationError as e:
            raise InvalidInputError(validation_message(e)) from e
        self.attempts.save_attempt(completed)

        if result.passed and exam.course_id:
            self.progress.mark_exam_completed(exam.course_id, attempt.user_id, exam.id)
            if self.evaluator is not None:
                self.evaluator.evaluate(exam.course_id, attempt.user_id)
        return completed
