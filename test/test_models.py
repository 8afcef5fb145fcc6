"""
Test cases for the quiz database models.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from quizapp import db
from quizapp.quiz.aggregate import Option as OptionValue
from quizapp.quiz.aggregate import Question as QuestionValue
from quizapp.quiz.models import Question, Quiz


class TestQuizModel:
    """Test cases for loading quizzes into aggregates."""

    def test_load_aggregate(self, app, seeded_quiz):
        with app.app_context():
            quiz = Quiz.load_aggregate(seeded_quiz['quiz_id'])

        assert quiz.title == 'General Knowledge'
        assert quiz.total_points == 5
        assert [q.id for q in quiz.questions] == [seeded_quiz['q1'], seeded_quiz['q2']]
        assert quiz.questions[1].find_option(seeded_quiz['q2_correct']).text == '4'
        assert quiz.questions[0].find_option(seeded_quiz['q2_correct']) is None
        assert quiz.find_question(seeded_quiz['q2']).text == '2 + 2 = ?'
        assert quiz.find_question(999) is None

    def test_load_missing(self, app):
        with app.app_context():
            assert Quiz.load_aggregate(999) is None

    def test_counts_and_next_index(self, app, seeded_quiz):
        with app.app_context():
            quiz = Quiz.load(seeded_quiz['quiz_id'])
            assert quiz.get_question_count() == 2
            assert quiz.get_total_points() == 5
            assert quiz.next_question_index() == 2
            assert quiz.questions[1].next_option_index() == 3


class TestQuestionModel:
    """Test cases for persisting validated questions."""

    def test_from_aggregate(self, app, seeded_quiz):
        value = QuestionValue(
            id=None,
            quiz_id=seeded_quiz['quiz_id'],
            text='Largest planet?',
            points=4,
            options=(OptionValue(None, 'Jupiter', True), OptionValue(None, 'Mars', False)),
        )
        with app.app_context():
            row = Question.from_aggregate(value, order_index=2)
            db.session.add(row)
            db.session.commit()

            stored = db.session.get(Question, row.id).to_aggregate()

        assert stored.quiz_id == seeded_quiz['quiz_id']
        assert [(o.text, o.is_correct) for o in stored.options] == [('Jupiter', True), ('Mars', False)]
        assert all(o.question_id == stored.id for o in stored.options)

    def test_points_range_is_enforced(self, app, seeded_quiz):
        with app.app_context():
            db.session.add(Question(quiz_id=seeded_quiz['quiz_id'], text='Too many points', points=9))
            with pytest.raises(IntegrityError):
                db.session.commit()
            db.session.rollback()
