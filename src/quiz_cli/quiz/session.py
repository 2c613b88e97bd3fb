"""Quiz session state machine.

A :class:`QuizSession` owns a shuffled, fixed list of questions and moves
forward one question per :meth:`QuizSession.submit_answer` call until every
question has been answered. It performs no I/O; prompting the player and
rendering feedback belong to the driver in :mod:`quiz_cli.quiz.app`.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import (
    AnswerOutcome,
    AnswerRecord,
    IncorrectAnswer,
    InvalidAnswerError,
    Question,
    QuizResults,
    SessionStateError,
    percentage_for,
    tier_for,
    validate_question,
)
from .shuffle import RandomSource, shuffled

__all__ = ["QuizSession"]


class QuizSession:
    """One playthrough over a shuffled set of questions."""

    def __init__(
        self,
        questions: Iterable[Question],
        category: str,
        *,
        rng: RandomSource | None = None,
    ) -> None:
        pool = list(questions)
        for question in pool:
            validate_question(question)
        self._questions: tuple[Question, ...] = tuple(shuffled(pool, rng))
        self.category = category
        self._position = 0
        self._score = 0
        self._answers: list[AnswerRecord] = []

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def position(self) -> int:
        return self._position

    @property
    def score(self) -> int:
        return self._score

    @property
    def answer_log(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._answers)

    @property
    def is_complete(self) -> bool:
        return self._position == len(self._questions)

    @property
    def current_question(self) -> Question | None:
        if self.is_complete:
            return None
        return self._questions[self._position]

    @property
    def progress_fraction(self) -> float:
        if not self._questions:
            return 0.0
        return self._position / len(self._questions)

    def submit_answer(self, selected_index: int) -> AnswerOutcome:
        """Record ``selected_index`` for the current question and advance."""

        question = self.current_question
        if question is None:
            raise SessionStateError(
                "cannot submit an answer: every question has been answered"
            )
        if isinstance(selected_index, bool) or not isinstance(
            selected_index, int
        ):
            raise InvalidAnswerError(
                f"answer index must be an int, got {selected_index!r}"
            )
        if not 0 <= selected_index < len(question.options):
            raise InvalidAnswerError(
                f"answer index {selected_index} is outside "
                f"0..{len(question.options) - 1}"
            )

        record = AnswerRecord(
            question_index=self._position,
            question_prompt=question.prompt,
            selected_index=selected_index,
            correct_index=question.correct_index,
        )
        self._answers.append(record)
        if record.is_correct:
            self._score += 1
        self._position += 1

        return AnswerOutcome(
            is_correct=record.is_correct,
            correct_option=None if record.is_correct else question.correct_option,
            explanation=question.explanation,
        )

    def build_results(self) -> QuizResults:
        """Summarize the session as it stands; safe to call repeatedly."""

        percentage = percentage_for(self._score, self.total)
        incorrect = tuple(
            IncorrectAnswer(
                record=record,
                options=self._questions[record.question_index].options,
            )
            for record in self._answers
            if not record.is_correct
        )
        return QuizResults(
            category=self.category,
            score=self._score,
            total=self.total,
            percentage=percentage,
            tier=tier_for(percentage),
            incorrect=incorrect,
        )
