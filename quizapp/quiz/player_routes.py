"""
Player routes for quiz functionality.

Anyone can:
- List quizzes and view quiz details (correct answers are shown to admins only)

Logged-in users can:
- Load a quiz to take it
- Submit answers and get their score back
"""
from flask import current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from quizapp import db
from quizapp.common.decorators import is_admin
from quizapp.quiz import quiz_bp
from quizapp.quiz.models import Question, Quiz
from quizapp.quiz.scoring import score_quiz
from quizapp.quiz.serializers import serialize_quiz, serialize_quiz_summary
from quizapp.security import SecurityLogger

FIELD_PREFIX = 'question_'


def _parse_option_id(value):
    """Option ids arrive as text; anything that is not an integer is kept as-is."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return value


def parse_form_submission(form) -> dict:
    """
    Turn ``question_<questionId>=<optionId>`` form fields into a
    question id -> option id mapping. Fields that do not follow the naming
    convention are ignored.
    """
    submission = {}
    for key in form.keys():
        if not key.startswith(FIELD_PREFIX):
            continue
        try:
            question_id = int(key[len(FIELD_PREFIX):])
        except ValueError:
            continue
        submission[question_id] = _parse_option_id(form.get(key))
    return submission


def parse_json_submission(data) -> dict:
    """
    Parse ``{"answers": {"<questionId>": <optionId>}}``.

    A body of any other shape is an empty submission.
    """
    if not isinstance(data, dict):
        return {}
    answers = data.get('answers') or {}
    if not isinstance(answers, dict):
        return {}
    submission = {}
    for key, value in answers.items():
        try:
            question_id = int(key)
        except (TypeError, ValueError):
            continue
        submission[question_id] = _parse_option_id(value)
    return submission


@quiz_bp.route('/quizzes', methods=['GET'])
def list_quizzes():
    """List all quizzes. Available without logging in."""
    try:
        quizzes = (
            db.session.query(Quiz)
            .options(selectinload(Quiz.questions).selectinload(Question.options))
            .order_by(Quiz.created_at, Quiz.id)
            .all()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error loading quiz list: {str(e)}")
        return jsonify({'success': False, 'error': 'Server error'}), 500

    return jsonify({
        'success': True,
        'quizzes': [serialize_quiz_summary(q.to_aggregate()) for q in quizzes]
    }), 200


@quiz_bp.route('/quizzes/<int:quiz_id>', methods=['GET'])
def get_quiz(quiz_id):
    """Quiz details with questions and options."""
    quiz = Quiz.load_aggregate(quiz_id)
    if quiz is None:
        current_app.logger.warning(f"Quiz {quiz_id} not found in details")
        return jsonify({'success': False, 'error': 'Quiz not found'}), 404

    return jsonify({'success': True, 'quiz': serialize_quiz(quiz, include_answers=is_admin())}), 200


@quiz_bp.route('/quizzes/<int:quiz_id>/take', methods=['GET'])
@login_required
def take_quiz(quiz_id):
    """
    Load a quiz for answering.

    Correctness flags are never included. Each question carries the form
    field name (``question_<id>``) its selected option id is submitted under.
    """
    quiz = Quiz.load_aggregate(quiz_id)
    if quiz is None:
        current_app.logger.warning(f"Quiz {quiz_id} not found in take")
        return jsonify({'success': False, 'error': 'Quiz not found'}), 404

    return jsonify({'success': True, 'quiz': serialize_quiz(quiz, include_answers=False)}), 200


@quiz_bp.route('/quizzes/<int:quiz_id>/submit', methods=['POST'])
@login_required
def submit_quiz(quiz_id):
    """
    Score a player's answers.

    Accepts either form fields named ``question_<questionId>`` whose value is
    the selected option id, or a JSON body:
    {
        "answers": {"12": 40, "13": 44}
    }

    Unanswered questions score 0. An option id that does not belong to its
    question is reported under ``diagnostics`` and scores 0.
    """
    quiz = Quiz.load_aggregate(quiz_id)
    if quiz is None:
        current_app.logger.warning(f"Quiz {quiz_id} not found in submit")
        return jsonify({'success': False, 'error': 'Quiz not found'}), 404

    if request.is_json:
        submission = parse_json_submission(request.get_json(silent=True) or {})
    else:
        submission = parse_form_submission(request.form)

    ignored = sorted(qid for qid in submission if quiz.find_question(qid) is None)
    if ignored:
        current_app.logger.info(f"Quiz {quiz_id} submission ignored answers for questions {ignored}")

    result = score_quiz(quiz, submission)

    for diagnostic in result.diagnostics:
        SecurityLogger.log_invalid_answer_reference(
            quiz_id, diagnostic.question_id, diagnostic.option_id, current_user.id
        )

    current_app.logger.info(
        f"Quiz {quiz_id} submitted by user {current_user.id}. "
        f"Score: {result.earned_points}/{result.total_points}."
    )
    return jsonify({'success': True, 'result': result.to_dict()}), 200
