"""
Authoring validation for quizzes, questions and options.

The validator turns a raw question draft into either a normalized
``Question`` ready to persist or the full list of reasons it cannot be
persisted. It never touches the database: anything it needs to know about
stored state (for example whether the owning quiz exists) is passed in.

Checks are independent functions returning tuples of error values, and the
validators simply concatenate their results, so every applicable error is
reported at once.

Correct-answer selection:
    ``QuestionDraft.correct_index`` always refers to the position in the
    *surviving* option list, i.e. after blank drafts were dropped. Forms that
    put a radio button next to each raw input row should convert the row
    number with :func:`surviving_index` before building the draft.

Re-validation scope on edit:
    Editing a question only changes its text and points, so
    :func:`validate_question_edit` re-checks those fields and the owning quiz
    and nothing else. Any change to the options goes through
    :func:`validate_option_set`, which checks the option list that the change
    would produce.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from quizapp.quiz.aggregate import (
    DESCRIPTION_MAX_LENGTH,
    MIN_OPTIONS,
    QUESTION_TEXT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Option,
    Question,
    clamp_points,
)
from quizapp.quiz.errors import (
    DescriptionTooLong,
    InsufficientOptions,
    MultipleCorrectAnswers,
    NoCorrectAnswerSelected,
    OptionTextRequired,
    QuestionTextRequired,
    QuestionTextTooLong,
    QuizError,
    QuizNotFound,
    TitleRequired,
    TitleTooLong,
)

Errors = tuple[QuizError, ...]


@dataclass(frozen=True)
class QuestionDraft:
    """Unvalidated question input as it arrives from an authoring form."""

    quiz_id: Optional[int]
    text: str
    points: int
    options: tuple[str, ...] = field(default_factory=tuple)
    correct_index: Optional[int] = None

    @classmethod
    def from_question(cls, question: Question) -> "QuestionDraft":
        """Build a draft back from an already normalized question."""
        correct_index = None
        for index, option in enumerate(question.options):
            if option.is_correct:
                correct_index = index
                break
        return cls(
            quiz_id=question.quiz_id,
            text=question.text,
            points=question.points,
            options=tuple(o.text for o in question.options),
            correct_index=correct_index,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Either a normalized question or the errors preventing it."""

    question: Optional[Question] = None
    errors: Errors = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class EditResult:
    text: str
    points: int
    errors: Errors = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class QuizValidationResult:
    title: str
    description: Optional[str]
    errors: Errors = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def normalize_options(texts: Sequence[Optional[str]]) -> tuple[str, ...]:
    """Drop blank option texts and trim the rest, keeping their order."""
    return tuple(t.strip() for t in texts if t is not None and t.strip())


def surviving_index(texts: Sequence[Optional[str]], raw_index: Optional[int]) -> Optional[int]:
    """
    Map a position in the raw option list to its position after normalization.

    Returns None when ``raw_index`` is missing, out of range, or points at a
    blank draft that normalization will drop.
    """
    if raw_index is None or raw_index < 0 or raw_index >= len(texts):
        return None
    raw_text = texts[raw_index]
    if raw_text is None or not raw_text.strip():
        return None
    return len(normalize_options(texts[:raw_index]))


def check_question_text(text: str) -> Errors:
    if not text:
        return (QuestionTextRequired(),)
    if len(text) > QUESTION_TEXT_MAX_LENGTH:
        return (QuestionTextTooLong(length=len(text), maximum=QUESTION_TEXT_MAX_LENGTH),)
    return ()


def check_option_count(options: Sequence[str]) -> Errors:
    if len(options) < MIN_OPTIONS:
        return (InsufficientOptions(count=len(options), minimum=MIN_OPTIONS),)
    return ()


def check_correct_index(options: Sequence[str], correct_index: Optional[int]) -> Errors:
    if correct_index is None or correct_index < 0 or correct_index >= len(options):
        return (NoCorrectAnswerSelected(index=correct_index),)
    return ()


def check_quiz_exists(quiz_id: Optional[int], quiz_exists: bool) -> Errors:
    if not quiz_exists:
        return (QuizNotFound(quiz_id=quiz_id),)
    return ()


def validate_question(draft: QuestionDraft, *, quiz_exists: bool) -> ValidationResult:
    """
    Normalize and validate a new question with its options.

    Args:
        draft: The raw question input
        quiz_exists: Whether the quiz named by ``draft.quiz_id`` exists

    Returns:
        A ValidationResult with the normalized question (options marked so
        that exactly the one at ``correct_index`` is correct), or with every
        error found.
    """
    text = (draft.text or "").strip()
    options = normalize_options(draft.options)

    errors = (
        check_option_count(options)
        + check_correct_index(options, draft.correct_index)
        + check_quiz_exists(draft.quiz_id, quiz_exists)
        + check_question_text(text)
    )
    if errors:
        return ValidationResult(errors=errors)

    question = Question(
        id=None,
        quiz_id=draft.quiz_id,
        text=text,
        points=clamp_points(draft.points),
        options=tuple(
            Option(id=None, text=option_text, is_correct=(index == draft.correct_index))
            for index, option_text in enumerate(options)
        ),
    )
    return ValidationResult(question=question)


def validate_question_edit(*, quiz_id: Optional[int], quiz_exists: bool, text: str, points: int) -> EditResult:
    """Validate an edit of a question's text and points."""
    text = (text or "").strip()
    errors = check_quiz_exists(quiz_id, quiz_exists) + check_question_text(text)
    return EditResult(text=text, points=clamp_points(points), errors=errors)


def validate_option_set(options: Sequence[Option]) -> Errors:
    """
    Check the invariants of a question's complete option list.

    Used for option additions, edits and deletions, against the list the
    mutation would leave behind.
    """
    errors: Errors = ()
    if any(not (o.text or "").strip() for o in options):
        errors += (OptionTextRequired(),)
    if len(options) < MIN_OPTIONS:
        errors += (InsufficientOptions(count=len(options), minimum=MIN_OPTIONS),)
    correct_count = sum(1 for o in options if o.is_correct)
    if correct_count == 0:
        errors += (NoCorrectAnswerSelected(),)
    elif correct_count > 1:
        errors += (MultipleCorrectAnswers(count=correct_count),)
    return errors


def validate_quiz(title: Optional[str], description: Optional[str]) -> QuizValidationResult:
    """Normalize and validate quiz title and description."""
    title = (title or "").strip()
    description = (description or "").strip() or None

    errors: Errors = ()
    if not title:
        errors += (TitleRequired(),)
    elif len(title) > TITLE_MAX_LENGTH:
        errors += (TitleTooLong(length=len(title), maximum=TITLE_MAX_LENGTH),)
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        errors += (DescriptionTooLong(length=len(description), maximum=DESCRIPTION_MAX_LENGTH),)

    return QuizValidationResult(title=title, description=description, errors=errors)
