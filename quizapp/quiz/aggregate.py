"""
In-memory shape of a quiz.

A quiz owns its questions and a question owns its options, so children are
held in tuples and the parents are referenced only by identifier. Values
that have not been persisted yet carry ``id=None``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
QUESTION_TEXT_MAX_LENGTH = 200
MIN_POINTS = 0
MAX_POINTS = 5
DEFAULT_POINTS = 1
MIN_OPTIONS = 2


def clamp_points(points: int) -> int:
    """Clamp a point value into the allowed range."""
    return max(MIN_POINTS, min(MAX_POINTS, int(points)))


@dataclass(frozen=True)
class Option:
    """One selectable answer of a question."""

    id: Optional[int]
    text: str
    is_correct: bool = False
    question_id: Optional[int] = None


@dataclass(frozen=True)
class Question:
    """A scored prompt with its ordered options."""

    id: Optional[int]
    quiz_id: Optional[int]
    text: str
    points: int = DEFAULT_POINTS
    options: tuple[Option, ...] = field(default_factory=tuple)

    def find_option(self, option_id: int) -> Optional[Option]:
        """Return the option of this question with the given id, or None."""
        for option in self.options:
            if option.id is not None and option.id == option_id:
                return option
        return None

    @property
    def correct_options(self) -> tuple[Option, ...]:
        return tuple(o for o in self.options if o.is_correct)


@dataclass(frozen=True)
class Quiz:
    """A named, ordered collection of questions."""

    id: Optional[int]
    title: str
    description: Optional[str] = None
    questions: tuple[Question, ...] = field(default_factory=tuple)

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)

    def find_question(self, question_id: int) -> Optional[Question]:
        for question in self.questions:
            if question.id is not None and question.id == question_id:
                return question
        return None
