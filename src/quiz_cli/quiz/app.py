"""Game loop: pick a category and length, play a round, offer a replay."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from .bank import Category, QuestionBank
from .models import QuizResults
from .ports import InteractionPort
from .render import Renderer
from .session import QuizSession
from .shuffle import RandomSource

__all__ = [
    "CountChoice",
    "count_choices",
    "start_session",
    "play_round",
    "run_app",
]

ALL_QUESTIONS = "All questions"
CATEGORY_PROMPT = "Choose a category:"
COUNT_PROMPT = "How many questions?"
REPLAY_PROMPT = "Would you like to play again?"


@dataclass(frozen=True)
class CountChoice:
    label: str
    count: Optional[int]


def count_choices(available: int, counts: Sequence[int]) -> list[CountChoice]:
    """Offer "All questions" plus every configured count the category can fill."""

    choices = [CountChoice(ALL_QUESTIONS, None)]
    for count in counts:
        if count <= available:
            choices.append(CountChoice(f"{count} questions", count))
    return choices


def start_session(
    category: Category,
    count: Optional[int],
    *,
    rng: RandomSource | None = None,
) -> QuizSession:
    """Build a session from the first ``count`` questions of ``category``."""

    pool = category.questions if count is None else category.questions[:count]
    return QuizSession(pool, category.name, rng=rng)


def play_round(
    session: QuizSession,
    port: InteractionPort,
    renderer: Renderer,
    *,
    logger: logging.Logger | None = None,
) -> QuizResults:
    """Ask every remaining question in ``session`` and render the results."""

    log = logger or logging.getLogger(__name__)
    while True:
        question = session.current_question
        if question is None:
            break
        renderer.question_header(session)
        index = port.select_option(question.prompt, question.options)
        outcome = session.submit_answer(index)
        log.debug(
            "answer submitted",
            extra={
                "event": "answer",
                "position": session.position,
                "correct": outcome.is_correct,
            },
        )
        renderer.feedback(outcome)
        if not session.is_complete:
            port.wait_for_acknowledgement()

    results = session.build_results()
    log.info(
        "session finished",
        extra={
            "event": "session_finished",
            "category": results.category,
            "score": results.score,
            "total": results.total,
            "tier": results.tier.value,
        },
    )
    renderer.results(results)
    return results


def run_app(
    bank: QuestionBank,
    port: InteractionPort,
    renderer: Renderer,
    *,
    question_counts: Sequence[int] = (3, 5),
    rng: RandomSource | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Run rounds until the player declines a replay; return the exit code."""

    log = logger or logging.getLogger(__name__)
    categories = list(bank)

    while True:
        renderer.banner()
        picked = port.select_option(
            CATEGORY_PROMPT, [category.name for category in categories]
        )
        category = categories[picked]

        choices = count_choices(len(category.questions), question_counts)
        choice = choices[
            port.select_option(COUNT_PROMPT, [item.label for item in choices])
        ]

        session = start_session(category, choice.count, rng=rng)
        log.info(
            "session started",
            extra={
                "event": "session_started",
                "category": category.id,
                "total": session.total,
            },
        )
        renderer.starting()
        port.wait_for_acknowledgement()

        play_round(session, port, renderer, logger=log)

        renderer.console.print()
        if not port.confirm(REPLAY_PROMPT):
            break

    renderer.farewell()
    return 0
