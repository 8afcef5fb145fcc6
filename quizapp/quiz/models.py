"""
Database models for quizzes.

A quiz owns its questions and a question owns its options; deleting a
parent deletes its children. ``to_aggregate()`` converts a loaded row tree
into the immutable in-memory aggregate used by validation and scoring.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import selectinload

from quizapp import db
from quizapp.quiz import aggregate
from quizapp.quiz.aggregate import (
    DEFAULT_POINTS,
    DESCRIPTION_MAX_LENGTH,
    MAX_POINTS,
    MIN_POINTS,
    QUESTION_TEXT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)


class Quiz(db.Model):
    """Model for quizzes authored by an admin."""
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description = db.Column(db.String(DESCRIPTION_MAX_LENGTH), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True)

    # Relationships
    creator = db.relationship("User", foreign_keys=[created_by])
    questions = db.relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by=lambda: [Question.order_index, Question.id],
    )

    def __repr__(self) -> str:
        return f"<Quiz {self.id}: {self.title}>"

    def get_total_points(self) -> int:
        """Calculate total points for all questions."""
        return sum(q.points for q in self.questions)

    def get_question_count(self) -> int:
        return len(self.questions)

    def next_question_index(self) -> int:
        return max((q.order_index for q in self.questions), default=-1) + 1

    @classmethod
    def load(cls, quiz_id: int) -> Optional["Quiz"]:
        """Load a quiz with its questions and options in one pass."""
        return (
            db.session.query(cls)
            .options(selectinload(cls.questions).selectinload(Question.options))
            .filter(cls.id == quiz_id)
            .one_or_none()
        )

    @classmethod
    def load_aggregate(cls, quiz_id: int) -> Optional[aggregate.Quiz]:
        quiz = cls.load(quiz_id)
        return quiz.to_aggregate() if quiz else None

    def to_aggregate(self) -> aggregate.Quiz:
        return aggregate.Quiz(
            id=self.id,
            title=self.title,
            description=self.description,
            questions=tuple(q.to_aggregate() for q in self.questions),
        )


class Question(db.Model):
    """Model for multiple choice questions."""
    __tablename__ = "quiz_questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    text = db.Column(db.String(QUESTION_TEXT_MAX_LENGTH), nullable=False)
    points = db.Column(db.Integer, nullable=False, default=DEFAULT_POINTS)
    order_index = db.Column(db.Integer, nullable=False, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    quiz = db.relationship("Quiz", back_populates="questions")
    options = db.relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by=lambda: [Option.order_index, Option.id],
    )

    __table_args__ = (
        db.Index('ix_quiz_questions_quiz_order', 'quiz_id', 'order_index'),
        db.CheckConstraint(f'points >= {MIN_POINTS} AND points <= {MAX_POINTS}', name='ck_quiz_questions_points_range'),
    )

    def __repr__(self) -> str:
        return f"<Question {self.id}: {self.text[:50]}>"

    @classmethod
    def from_aggregate(cls, question: aggregate.Question, order_index: int = 0) -> "Question":
        """Build a new row tree from a validated, unsaved question."""
        row = cls(
            quiz_id=question.quiz_id,
            text=question.text,
            points=question.points,
            order_index=order_index,
        )
        row.options = [
            Option(text=o.text, is_correct=o.is_correct, order_index=index)
            for index, o in enumerate(question.options)
        ]
        return row

    def next_option_index(self) -> int:
        return max((o.order_index for o in self.options), default=-1) + 1

    def to_aggregate(self) -> aggregate.Question:
        return aggregate.Question(
            id=self.id,
            quiz_id=self.quiz_id,
            text=self.text,
            points=self.points,
            options=tuple(o.to_aggregate() for o in self.options),
        )


class Option(db.Model):
    """Model for the answer options of a question."""
    __tablename__ = "quiz_question_options"

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("quiz_questions.id", ondelete='CASCADE'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    question = db.relationship("Question", back_populates="options")

    __table_args__ = (
        db.Index('ix_question_options_question_order', 'question_id', 'order_index'),
    )

    def __repr__(self) -> str:
        return f"<Option {self.id}: {self.text[:50]}>"

    def to_aggregate(self) -> aggregate.Option:
        return aggregate.Option(
            id=self.id,
            text=self.text,
            is_correct=self.is_correct,
            question_id=self.question_id,
        )
