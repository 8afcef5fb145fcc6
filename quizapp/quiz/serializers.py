"""
JSON projections of the quiz aggregate.

Correctness flags are only included when ``include_answers`` is set, so the
same helpers serve the admin views and the player's take page.
"""
from flask import jsonify

from quizapp.quiz.aggregate import Option, Question, Quiz
from quizapp.quiz.errors import QuizNotFound


def serialize_option(option: Option, include_answers: bool = False) -> dict:
    data = {'id': option.id, 'text': option.text}
    if include_answers:
        data['is_correct'] = option.is_correct
    return data


def serialize_question(question: Question, include_answers: bool = False) -> dict:
    return {
        'id': question.id,
        'quiz_id': question.quiz_id,
        'text': question.text,
        'points': question.points,
        'field_name': f'question_{question.id}',
        'options': [serialize_option(o, include_answers) for o in question.options],
    }


def serialize_quiz_summary(quiz: Quiz) -> dict:
    return {
        'id': quiz.id,
        'title': quiz.title,
        'description': quiz.description,
        'question_count': len(quiz.questions),
        'total_points': quiz.total_points,
    }


def serialize_quiz(quiz: Quiz, include_answers: bool = False) -> dict:
    data = serialize_quiz_summary(quiz)
    data['questions'] = [serialize_question(q, include_answers) for q in quiz.questions]
    return data


def validation_error_response(errors):
    """
    Build the JSON response for a list of validation errors.

    A missing quiz on its own is reported as 404, anything else as 400.
    """
    status = 404 if errors and all(isinstance(e, QuizNotFound) for e in errors) else 400
    return jsonify({
        'success': False,
        'error': errors[0].message if errors else 'Validation failed',
        'errors': [e.to_dict() for e in errors],
    }), status
