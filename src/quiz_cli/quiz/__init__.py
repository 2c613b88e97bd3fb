from .app import CountChoice, count_choices, play_round, run_app, start_session
from .bank import Category, QuestionBank, load_bank, parse_bank
from .config import (
    ConfigOverrides,
    QuizConfig,
    QuizConfigError,
    load_config,
)
from .models import (
    AnswerOutcome,
    AnswerRecord,
    IncorrectAnswer,
    InvalidAnswerError,
    InvalidQuestionError,
    PerformanceTier,
    Question,
    QuestionBankError,
    QuizError,
    QuizResults,
    SessionStateError,
    percentage_for,
    tier_for,
)
from .ports import ConsolePort, InteractionPort
from .render import Renderer, progress_bar
from .session import QuizSession
from .shuffle import shuffled

__all__ = [
    "CountChoice",
    "count_choices",
    "play_round",
    "run_app",
    "start_session",
    "Category",
    "QuestionBank",
    "load_bank",
    "parse_bank",
    "ConfigOverrides",
    "QuizConfig",
    "QuizConfigError",
    "load_config",
    "AnswerOutcome",
    "AnswerRecord",
    "IncorrectAnswer",
    "InvalidAnswerError",
    "InvalidQuestionError",
    "PerformanceTier",
    "Question",
    "QuestionBankError",
    "QuizError",
    "QuizResults",
    "SessionStateError",
    "percentage_for",
    "tier_for",
    "ConsolePort",
    "InteractionPort",
    "Renderer",
    "progress_bar",
    "QuizSession",
    "shuffled",
]
