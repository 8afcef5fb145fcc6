"""
Admin routes for quiz authoring.

Admins can:
- Create, edit and delete quizzes
- Add questions (with their options) to a quiz
- Edit question text and points, delete questions
- Add, edit and delete individual options

Every write goes through the authoring validator first; nothing is
persisted when it reports errors.
"""
from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from quizapp import db
from quizapp.common.decorators import admin_required
from quizapp.quiz import quiz_bp
from quizapp.quiz import aggregate
from quizapp.quiz.aggregate import DEFAULT_POINTS
from quizapp.quiz.authoring import (
    QuestionDraft,
    surviving_index,
    validate_option_set,
    validate_question,
    validate_question_edit,
    validate_quiz,
)
from quizapp.quiz.models import Option, Question, Quiz
from quizapp.quiz.serializers import (
    serialize_option,
    serialize_question,
    serialize_quiz,
    validation_error_response,
)


def _as_text(value):
    return None if value is None else str(value)


def _as_int(value):
    """Parse an optional integer field; raises ValueError for garbage."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)


def _payload() -> dict:
    """Request body as a dict, from JSON or from form fields. A non-object JSON body is empty."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    data = request.form.to_dict()
    if 'options' in request.form:
        data['options'] = request.form.getlist('options')
    return data


def _option_text(entry):
    if isinstance(entry, dict):
        return _as_text(entry.get('text'))
    return _as_text(entry)


def _mark_correct(options, target_id, is_correct):
    """
    Options as they would be after setting ``is_correct`` on one of them.

    Marking an option correct moves the flag to it, so a question keeps a
    single correct answer.
    """
    result = []
    for o in options:
        if o.id == target_id:
            result.append(aggregate.Option(o.id, o.text, is_correct, o.question_id))
        elif is_correct:
            result.append(aggregate.Option(o.id, o.text, False, o.question_id))
        else:
            result.append(o)
    return result


def _not_found(kind, object_id):
    current_app.logger.warning(f"{kind} {object_id} not found")
    return jsonify({'success': False, 'error': f'{kind} not found'}), 404


def _server_error(action, error):
    db.session.rollback()
    current_app.logger.error(f"Error {action}: {str(error)}")
    return jsonify({'success': False, 'error': 'Server error'}), 500


# ----------------------------------------------------------------------------
# Quizzes
# ----------------------------------------------------------------------------

@quiz_bp.route('/quizzes', methods=['POST'])
@admin_required
def create_quiz():
    """
    Create a new, empty quiz.

    Request body:
    {
        "title": "Capitals of Europe",
        "description": "Optional description"
    }
    """
    data = _payload()
    result = validate_quiz(_as_text(data.get('title')), _as_text(data.get('description')))
    if not result.ok:
        current_app.logger.warning(f"Quiz creation rejected: {[e.code for e in result.errors]}")
        return validation_error_response(result.errors)

    try:
        quiz = Quiz(title=result.title, description=result.description, created_by=current_user.id)
        db.session.add(quiz)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error("creating quiz", e)

    current_app.logger.info(f"Quiz {quiz.id} created by user {current_user.id}")
    return jsonify({
        'success': True,
        'message': 'Quiz created successfully',
        'quiz': serialize_quiz(quiz.to_aggregate(), include_answers=True)
    }), 201


@quiz_bp.route('/quizzes/<int:quiz_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_quiz(quiz_id):
    """Update quiz title and/or description."""
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return _not_found('Quiz', quiz_id)

    data = _payload()
    title = _as_text(data['title']) if 'title' in data else quiz.title
    description = _as_text(data['description']) if 'description' in data else quiz.description

    result = validate_quiz(title, description)
    if not result.ok:
        current_app.logger.warning(f"Quiz {quiz_id} update rejected: {[e.code for e in result.errors]}")
        return validation_error_response(result.errors)

    try:
        quiz.title = result.title
        quiz.description = result.description
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"updating quiz {quiz_id}", e)

    current_app.logger.info(f"Quiz {quiz_id} updated")
    return jsonify({
        'success': True,
        'message': 'Quiz updated successfully',
        'quiz': serialize_quiz(quiz.to_aggregate(), include_answers=True)
    }), 200


@quiz_bp.route('/quizzes/<int:quiz_id>', methods=['DELETE'])
@admin_required
def delete_quiz(quiz_id):
    """Delete a quiz together with its questions and options."""
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return _not_found('Quiz', quiz_id)

    try:
        db.session.delete(quiz)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"deleting quiz {quiz_id}", e)

    current_app.logger.info(f"Quiz {quiz_id} deleted")
    return jsonify({'success': True, 'message': 'Quiz deleted successfully'}), 200


# ----------------------------------------------------------------------------
# Questions
# ----------------------------------------------------------------------------

@quiz_bp.route('/quizzes/<int:quiz_id>/questions', methods=['POST'])
@admin_required
def add_question(quiz_id):
    """
    Add a question with its options to a quiz.

    Request body:
    {
        "text": "What is the capital of France?",
        "points": 3,
        "options": ["Paris", "Lyon", ""],
        "correct_index": 0
    }

    Blank options are dropped before validation. ``correct_index`` counts
    positions in the list *after* blank options were dropped. Clients that
    track the selection by input row send ``correct_draft`` (a position in
    the raw ``options`` list) instead, and it is re-indexed here.
    """
    data = _payload()
    options = data.get('options') or []
    if not isinstance(options, (list, tuple)):
        current_app.logger.warning(f"Question for quiz {quiz_id} rejected: options is not a list")
        return jsonify({'success': False, 'error': 'Options must be a list'}), 400
    raw_options = [_option_text(o) for o in options]

    try:
        points = _as_int(data.get('points'))
        correct_index = _as_int(data.get('correct_index'))
        correct_draft = _as_int(data.get('correct_draft'))
    except (TypeError, ValueError) as e:
        return jsonify({'success': False, 'error': f'Invalid numeric value: {str(e)}'}), 400

    if correct_index is None and correct_draft is not None:
        correct_index = surviving_index(raw_options, correct_draft)

    quiz = Quiz.load(quiz_id)
    draft = QuestionDraft(
        quiz_id=quiz_id,
        text=_as_text(data.get('text')) or '',
        points=DEFAULT_POINTS if points is None else points,
        options=tuple(raw_options),
        correct_index=correct_index,
    )
    result = validate_question(draft, quiz_exists=quiz is not None)
    if not result.ok:
        current_app.logger.warning(
            f"Question for quiz {quiz_id} rejected: {[e.code for e in result.errors]}"
        )
        return validation_error_response(result.errors)

    try:
        question = Question.from_aggregate(result.question, order_index=quiz.next_question_index())
        db.session.add(question)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"creating question for quiz {quiz_id}", e)

    current_app.logger.info(f"Question {question.id} created for quiz {quiz_id}")
    return jsonify({
        'success': True,
        'message': 'Question added successfully',
        'question': serialize_question(question.to_aggregate(), include_answers=True)
    }), 201


@quiz_bp.route('/questions/<int:question_id>', methods=['GET'])
@admin_required
def get_question(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        return _not_found('Question', question_id)

    data = serialize_question(question.to_aggregate(), include_answers=True)
    data['quiz_title'] = question.quiz.title
    return jsonify({'success': True, 'question': data}), 200


@quiz_bp.route('/questions/<int:question_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_question(question_id):
    """
    Edit a question's text, points or owning quiz.

    Options are not part of a question edit and are not re-validated here;
    they change only through the option routes.
    """
    question = db.session.get(Question, question_id)
    if not question:
        return _not_found('Question', question_id)

    data = _payload()
    try:
        points = _as_int(data.get('points')) if 'points' in data else question.points
        quiz_id = _as_int(data.get('quiz_id')) if 'quiz_id' in data else question.quiz_id
    except (TypeError, ValueError) as e:
        return jsonify({'success': False, 'error': f'Invalid numeric value: {str(e)}'}), 400
    text = _as_text(data['text']) if 'text' in data else question.text

    quiz_exists = quiz_id is not None and db.session.get(Quiz, quiz_id) is not None
    result = validate_question_edit(
        quiz_id=quiz_id,
        quiz_exists=quiz_exists,
        text=text,
        points=question.points if points is None else points,
    )
    if not result.ok:
        current_app.logger.warning(
            f"Question {question_id} update rejected: {[e.code for e in result.errors]}"
        )
        return validation_error_response(result.errors)

    try:
        if quiz_id != question.quiz_id:
            target = db.session.get(Quiz, quiz_id)
            question.order_index = target.next_question_index()
            question.quiz = target
        question.text = result.text
        question.points = result.points
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"updating question {question_id}", e)

    current_app.logger.info(f"Question {question_id} updated for quiz {question.quiz_id}")
    return jsonify({
        'success': True,
        'message': 'Question updated successfully',
        'question': serialize_question(question.to_aggregate(), include_answers=True)
    }), 200


@quiz_bp.route('/questions/<int:question_id>', methods=['DELETE'])
@admin_required
def delete_question(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        return _not_found('Question', question_id)

    quiz_id = question.quiz_id
    try:
        db.session.delete(question)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"deleting question {question_id}", e)

    current_app.logger.info(f"Question {question_id} deleted for quiz {quiz_id}")
    return jsonify({'success': True, 'message': 'Question deleted successfully', 'quiz_id': quiz_id}), 200


# ----------------------------------------------------------------------------
# Options
# ----------------------------------------------------------------------------

@quiz_bp.route('/questions/<int:question_id>/options', methods=['GET'])
@admin_required
def list_options(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        return _not_found('Question', question_id)

    return jsonify({
        'success': True,
        'question_id': question_id,
        'question_text': question.text,
        'options': [serialize_option(o.to_aggregate(), include_answers=True) for o in question.options]
    }), 200


@quiz_bp.route('/questions/<int:question_id>/options', methods=['POST'])
@admin_required
def add_option(question_id):
    """
    Add an option to an existing question.

    Request body:
    {
        "text": "Marseille",
        "is_correct": false
    }

    Adding an option marked correct makes it the question's only correct
    answer.
    """
    question = db.session.get(Question, question_id)
    if not question:
        return _not_found('Question', question_id)

    data = _payload()
    text = (_as_text(data.get('text')) or '').strip()
    is_correct = _as_bool(data.get('is_correct', False))

    current = [o.to_aggregate() for o in question.options]
    new_option = aggregate.Option(id=None, text=text, is_correct=False, question_id=question_id)
    prospective = _mark_correct(current + [new_option], None, True) if is_correct else current + [new_option]

    errors = validate_option_set(prospective)
    if errors:
        current_app.logger.warning(
            f"Option for question {question_id} rejected: {[e.code for e in errors]}"
        )
        return validation_error_response(errors)

    try:
        if is_correct:
            for existing in question.options:
                existing.is_correct = False
        option = Option(text=text, is_correct=is_correct, order_index=question.next_option_index())
        question.options.append(option)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"creating option for question {question_id}", e)

    current_app.logger.info(f"Option {option.id} created for question {question_id}")
    return jsonify({
        'success': True,
        'message': 'Option added successfully',
        'option': serialize_option(option.to_aggregate(), include_answers=True)
    }), 201


@quiz_bp.route('/options/<int:option_id>', methods=['GET'])
@admin_required
def get_option(option_id):
    option = db.session.get(Option, option_id)
    if not option:
        return _not_found('Option', option_id)

    data = serialize_option(option.to_aggregate(), include_answers=True)
    data['question_id'] = option.question_id
    return jsonify({'success': True, 'option': data}), 200


@quiz_bp.route('/options/<int:option_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_option(option_id):
    """
    Edit an option's text and/or correctness.

    Marking an option correct moves the correct flag to it; unmarking the
    only correct option is rejected.
    """
    option = db.session.get(Option, option_id)
    if not option:
        return _not_found('Option', option_id)

    data = _payload()
    text = (_as_text(data['text']) or '').strip() if 'text' in data else option.text
    is_correct = _as_bool(data['is_correct']) if 'is_correct' in data else option.is_correct

    question = option.question
    prospective = []
    for o in question.options:
        current = o.to_aggregate()
        if o.id == option_id:
            current = aggregate.Option(o.id, text, current.is_correct, o.question_id)
        prospective.append(current)
    prospective = _mark_correct(prospective, option_id, is_correct)

    errors = validate_option_set(prospective)
    if errors:
        current_app.logger.warning(f"Option {option_id} update rejected: {[e.code for e in errors]}")
        return validation_error_response(errors)

    try:
        flags = {o.id: o.is_correct for o in prospective}
        for o in question.options:
            o.is_correct = flags[o.id]
        option.text = text
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"updating option {option_id}", e)

    current_app.logger.info(f"Option {option_id} updated for question {question.id}")
    return jsonify({
        'success': True,
        'message': 'Option updated successfully',
        'option': serialize_option(option.to_aggregate(), include_answers=True)
    }), 200


@quiz_bp.route('/options/<int:option_id>', methods=['DELETE'])
@admin_required
def delete_option(option_id):
    """Delete an option, unless the question would be left invalid."""
    option = db.session.get(Option, option_id)
    if not option:
        return _not_found('Option', option_id)

    question = option.question
    remaining = [o.to_aggregate() for o in question.options if o.id != option_id]
    errors = validate_option_set(remaining)
    if errors:
        current_app.logger.warning(f"Option {option_id} deletion rejected: {[e.code for e in errors]}")
        return validation_error_response(errors)

    try:
        question.options.remove(option)
        db.session.commit()
    except SQLAlchemyError as e:
        return _server_error(f"deleting option {option_id}", e)

    current_app.logger.info(f"Option {option_id} deleted for question {question.id}")
    return jsonify({'success': True, 'message': 'Option deleted successfully', 'question_id': question.id}), 200
