"""Question bank loading and validation.

Banks are JSON documents of the form::

    {"categories": {"<id>": {"name": "...", "questions": [
        {"question": "...", "options": ["...", "..."], "answer": 0,
         "explanation": "..."}]}}}

``answer`` is the zero-based index of the correct option. Every problem is
reported as a :class:`QuestionBankError` naming the offending category and
question so a broken bank aborts startup with a usable diagnostic.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .models import (
    InvalidQuestionError,
    Question,
    QuestionBankError,
    validate_question,
)

__all__ = [
    "DEFAULT_BANK_PACKAGE",
    "DEFAULT_BANK_FILENAME",
    "Category",
    "QuestionBank",
    "load_bank",
    "parse_bank",
]

DEFAULT_BANK_PACKAGE = "quiz_cli.quiz.data"
DEFAULT_BANK_FILENAME = "questions.json"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class QuestionBank:
    """Categories in the order the bank file lists them."""

    categories: Mapping[str, Category]
    source: str = "<memory>"

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories.values())

    def __len__(self) -> int:
        return len(self.categories)

    @property
    def category_ids(self) -> tuple[str, ...]:
        return tuple(self.categories)

    def get(self, category_id: str) -> Category:
        try:
            return self.categories[category_id]
        except KeyError as exc:
            raise QuestionBankError(
                f"Unknown category '{category_id}' in {self.source}"
            ) from exc


def load_bank(path: Path | None = None) -> QuestionBank:
    """Read and validate a bank from ``path`` or the packaged default."""

    if path is None:
        source = f"{DEFAULT_BANK_PACKAGE}/{DEFAULT_BANK_FILENAME}"
        try:
            text = (
                resources.files(DEFAULT_BANK_PACKAGE)
                .joinpath(DEFAULT_BANK_FILENAME)
                .read_text(encoding="utf-8")
            )
        except (FileNotFoundError, ModuleNotFoundError) as exc:
            raise QuestionBankError(
                f"Packaged question bank not found: {source}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise QuestionBankError(
                f"Question bank {source} is not valid UTF-8: {exc}"
            ) from exc
    else:
        source = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise QuestionBankError(
                f"Question bank not found: {source}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise QuestionBankError(
                f"Question bank {source} is not valid UTF-8: {exc}"
            ) from exc
        except OSError as exc:
            raise QuestionBankError(
                f"Unable to read question bank {source}: {exc}"
            ) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionBankError(
            f"Question bank {source} is not valid JSON: {exc}"
        ) from exc
    return parse_bank(data, source=source)


def parse_bank(data: Any, *, source: str = "<memory>") -> QuestionBank:
    """Build a :class:`QuestionBank` from already-decoded JSON data."""

    if not isinstance(data, Mapping):
        raise QuestionBankError(f"{source}: top level must be an object")
    raw_categories = data.get("categories")
    if not isinstance(raw_categories, Mapping) or not raw_categories:
        raise QuestionBankError(
            f"{source}: 'categories' must be a non-empty object"
        )

    categories: dict[str, Category] = {}
    for category_id, raw in raw_categories.items():
        categories[str(category_id)] = _parse_category(
            str(category_id), raw, source=source
        )
    return QuestionBank(
        categories=MappingProxyType(categories),
        source=source,
    )


def _parse_category(category_id: str, raw: Any, *, source: str) -> Category:
    where = f"{source}: category '{category_id}'"
    if not isinstance(raw, Mapping):
        raise QuestionBankError(f"{where} must be an object")
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise QuestionBankError(f"{where} needs a non-empty 'name'")
    raw_questions = raw.get("questions")
    # An empty list is allowed; it plays as a 0/0 session.
    if not isinstance(raw_questions, list):
        raise QuestionBankError(f"{where} needs a 'questions' list")
    questions = tuple(
        _parse_question(item, where=f"{where} question {number}")
        for number, item in enumerate(raw_questions, start=1)
    )
    return Category(id=category_id, name=name.strip(), questions=questions)


def _parse_question(raw: Any, *, where: str) -> Question:
    if not isinstance(raw, Mapping):
        raise QuestionBankError(f"{where} must be an object")
    prompt = raw.get("question")
    if not isinstance(prompt, str):
        raise QuestionBankError(f"{where} needs a 'question' string")
    options = raw.get("options")
    if not isinstance(options, list) or not all(
        isinstance(option, str) for option in options
    ):
        raise QuestionBankError(f"{where} needs an 'options' list of strings")
    explanation = raw.get("explanation")
    if explanation is not None and not isinstance(explanation, str):
        raise QuestionBankError(f"{where} has a non-string 'explanation'")

    question = Question(
        prompt=prompt.strip(),
        options=tuple(options),
        correct_index=raw.get("answer"),  # type: ignore[arg-type]
        explanation=(explanation or "").strip() or None,
    )
    try:
        validate_question(question)
    except InvalidQuestionError as exc:
        raise InvalidQuestionError(f"{where}: {exc}") from exc
    return question
