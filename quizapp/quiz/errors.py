"""
Error values produced by the quiz authoring validator and the scoring engine.

These are plain values returned to the caller, never raised. Every error has
a stable ``code`` for API clients and a ``message`` meant for display next
to the form field that caused it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class QuizError:
    """Base class of all quiz error values."""

    code = "quiz_error"

    @property
    def message(self) -> str:
        return "Invalid quiz data."

    def to_dict(self) -> dict[str, Any]:
        data = {"code": self.code, "message": self.message}
        data.update(asdict(self))
        return data


@dataclass(frozen=True)
class InsufficientOptions(QuizError):
    count: int
    minimum: int = 2

    code = "insufficient_options"

    @property
    def message(self) -> str:
        return f"Please enter at least {self.minimum} answer options."


@dataclass(frozen=True)
class NoCorrectAnswerSelected(QuizError):
    index: Optional[int] = None

    code = "no_correct_answer_selected"

    @property
    def message(self) -> str:
        return "Please select which answer is correct."


@dataclass(frozen=True)
class MultipleCorrectAnswers(QuizError):
    count: int

    code = "multiple_correct_answers"

    @property
    def message(self) -> str:
        return f"Exactly one answer must be correct, found {self.count}."


@dataclass(frozen=True)
class OptionTextRequired(QuizError):
    code = "option_text_required"

    @property
    def message(self) -> str:
        return "Answer option text is required."


@dataclass(frozen=True)
class QuizNotFound(QuizError):
    quiz_id: Optional[int]

    code = "quiz_not_found"

    @property
    def message(self) -> str:
        return f"No quiz found with ID: {self.quiz_id}"


@dataclass(frozen=True)
class QuestionTextRequired(QuizError):
    code = "question_text_required"

    @property
    def message(self) -> str:
        return "Question text is required."


@dataclass(frozen=True)
class QuestionTextTooLong(QuizError):
    length: int
    maximum: int

    code = "question_text_too_long"

    @property
    def message(self) -> str:
        return f"Question text must be at most {self.maximum} characters."


@dataclass(frozen=True)
class TitleRequired(QuizError):
    code = "title_required"

    @property
    def message(self) -> str:
        return "Quiz title is required."


@dataclass(frozen=True)
class TitleTooLong(QuizError):
    length: int
    maximum: int

    code = "title_too_long"

    @property
    def message(self) -> str:
        return f"Quiz title must be at most {self.maximum} characters."


@dataclass(frozen=True)
class DescriptionTooLong(QuizError):
    length: int
    maximum: int

    code = "description_too_long"

    @property
    def message(self) -> str:
        return f"Quiz description must be at most {self.maximum} characters."


@dataclass(frozen=True)
class InvalidAnswerReference(QuizError):
    """A submitted option id that does not belong to the answered question."""

    question_id: int
    option_id: Any

    code = "invalid_answer_reference"

    @property
    def message(self) -> str:
        return (
            f"Option {self.option_id!r} is not an answer of question {self.question_id}; "
            "the question was scored as unanswered."
        )
