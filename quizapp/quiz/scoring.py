"""
Scoring engine.

Maps a fully loaded quiz and a player's submission to a score. The
submission is a mapping from question id to the selected option id; a
question missing from it is unanswered. A selected option that does not
belong to its question is reported as an ``InvalidAnswerReference`` and the
question is scored as unanswered, so stale or forged form data cannot abort
scoring.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from quizapp.quiz.aggregate import Quiz
from quizapp.quiz.errors import InvalidAnswerReference

CORRECT = "correct"
INCORRECT = "incorrect"
UNANSWERED = "unanswered"
INVALID = "invalid"


@dataclass(frozen=True)
class QuestionOutcome:
    question_id: Optional[int]
    status: str
    points_earned: int
    points_possible: int
    selected_option_id: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "selectedOptionId": self.selected_option_id,
            "status": self.status,
            "pointsEarned": self.points_earned,
            "pointsPossible": self.points_possible,
        }


@dataclass(frozen=True)
class QuizResult:
    quiz_title: str
    total_points: int
    earned_points: int
    outcomes: tuple[QuestionOutcome, ...] = field(default_factory=tuple)
    diagnostics: tuple[InvalidAnswerReference, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "quizTitle": self.quiz_title,
            "totalPoints": self.total_points,
            "earnedPoints": self.earned_points,
            "answers": [o.to_dict() for o in self.outcomes],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def score_quiz(quiz: Quiz, submission: Mapping[int, Any]) -> QuizResult:
    """
    Score a submission against a quiz.

    Every question's points count towards the total whether it was answered
    or not. Submission entries for questions that are not part of the quiz
    are ignored.

    Args:
        quiz: Quiz aggregate with all questions and options loaded
        submission: Question id -> selected option id

    Returns:
        QuizResult with the totals, a per-question breakdown in stored
        question order, and any invalid answer references.
    """
    total_points = 0
    earned_points = 0
    outcomes = []
    diagnostics = []

    for question in quiz.questions:
        total_points += question.points

        if question.id not in submission:
            outcomes.append(QuestionOutcome(question.id, UNANSWERED, 0, question.points))
            continue

        selected_id = submission[question.id]
        option = question.find_option(selected_id)
        if option is None:
            diagnostics.append(InvalidAnswerReference(question_id=question.id, option_id=selected_id))
            outcomes.append(QuestionOutcome(question.id, INVALID, 0, question.points, selected_id))
            continue

        if option.is_correct:
            earned_points += question.points
            outcomes.append(QuestionOutcome(question.id, CORRECT, question.points, question.points, selected_id))
        else:
            outcomes.append(QuestionOutcome(question.id, INCORRECT, 0, question.points, selected_id))

    return QuizResult(
        quiz_title=quiz.title,
        total_points=total_points,
        earned_points=earned_points,
        outcomes=tuple(outcomes),
        diagnostics=tuple(diagnostics),
    )
