"""Immutable records shared by the quiz session, bank loader and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "QuizError",
    "QuestionBankError",
    "InvalidQuestionError",
    "SessionStateError",
    "InvalidAnswerError",
    "Question",
    "AnswerRecord",
    "AnswerOutcome",
    "IncorrectAnswer",
    "PerformanceTier",
    "QuizResults",
    "validate_question",
    "percentage_for",
    "tier_for",
]


class QuizError(RuntimeError):
    """Base class for quiz failures."""


class QuestionBankError(QuizError):
    """Raised when a question bank cannot be read or is malformed."""


class InvalidQuestionError(QuestionBankError):
    """Raised when a single question violates its integrity rules."""


class SessionStateError(QuizError):
    """Raised when a session operation is invoked in the wrong state."""


class InvalidAnswerError(QuizError):
    """Raised when an answer index does not address an option."""


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with a single correct option."""

    prompt: str
    options: tuple[str, ...]
    correct_index: int
    explanation: str | None = None

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]


def validate_question(question: Question) -> None:
    """Raise :class:`InvalidQuestionError` if ``question`` is unusable."""

    if not isinstance(question.prompt, str) or not question.prompt.strip():
        raise InvalidQuestionError("question prompt must be a non-empty string")
    if len(question.options) < 2:
        raise InvalidQuestionError(
            f"question {question.prompt!r} needs at least 2 options"
        )
    index = question.correct_index
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidQuestionError(
            f"question {question.prompt!r} has a non-integer correct index"
        )
    if not 0 <= index < len(question.options):
        raise InvalidQuestionError(
            f"question {question.prompt!r} has correct index {index} outside "
            f"0..{len(question.options) - 1}"
        )


@dataclass(frozen=True)
class AnswerRecord:
    """What the player picked for the question at ``question_index``."""

    question_index: int
    question_prompt: str
    selected_index: int
    correct_index: int

    @property
    def is_correct(self) -> bool:
        return self.selected_index == self.correct_index


@dataclass(frozen=True)
class AnswerOutcome:
    """Immediate feedback for a submitted answer."""

    is_correct: bool
    correct_option: str | None
    explanation: str | None = None


@dataclass(frozen=True)
class IncorrectAnswer:
    """A wrong answer paired with the options it was chosen from."""

    record: AnswerRecord
    options: tuple[str, ...]

    @property
    def prompt(self) -> str:
        return self.record.question_prompt

    @property
    def selected_option(self) -> str:
        return self.options[self.record.selected_index]

    @property
    def correct_option(self) -> str:
        return self.options[self.record.correct_index]


class PerformanceTier(Enum):
    PERFECT = "perfect"
    GREAT = "great"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_PRACTICE = "needs practice"


# Inclusive lower bounds, highest first.
_TIER_THRESHOLDS: tuple[tuple[int, PerformanceTier], ...] = (
    (100, PerformanceTier.PERFECT),
    (80, PerformanceTier.GREAT),
    (60, PerformanceTier.GOOD),
    (40, PerformanceTier.FAIR),
)


def percentage_for(score: int, total: int) -> int:
    """Return ``100 * score / total`` rounded half up, or 0 for no questions."""

    if total <= 0:
        return 0
    return (200 * score + total) // (2 * total)


def tier_for(percentage: int) -> PerformanceTier:
    for threshold, tier in _TIER_THRESHOLDS:
        if percentage >= threshold:
            return tier
    return PerformanceTier.NEEDS_PRACTICE


@dataclass(frozen=True)
class QuizResults:
    """Summary of a session suitable for the results report."""

    category: str
    score: int
    total: int
    percentage: int
    tier: PerformanceTier
    incorrect: tuple[IncorrectAnswer, ...] = ()
