"""Shared testing fixtures and doubles for the quiz-cli test suite."""

from .interaction import ScriptedInput, ScriptedPort, SequenceRandom  # noqa: F401
from .workspace import BankBuilder, WorkspaceBuilder, question_dict  # noqa: F401

__all__ = [
    "BankBuilder",
    "ScriptedInput",
    "ScriptedPort",
    "SequenceRandom",
    "WorkspaceBuilder",
    "question_dict",
]
