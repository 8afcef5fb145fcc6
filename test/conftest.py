"""
Pytest configuration and fixtures for testing.
Each test gets a fresh application backed by an in-memory SQLite database.
"""
import os

import pytest

# Set test environment variables BEFORE importing the app
os.environ['FLASK_ENV'] = 'testing'
os.environ['SECRET_KEY'] = 'sfndsfojoriwew09rjfjndsknfkj'
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['AUTH_API_PREFIX'] = '/auth/api'
os.environ['QUIZ_API_PREFIX'] = '/quiz/api'
os.environ['MIN_PASSWORD_LENGTH'] = '8'
os.environ['ADMIN_EMAIL'] = 'admin@example.com'
os.environ['ADMIN_PASSWORD'] = 'Admin123!'

from quizapp import create_app, db  # noqa: E402

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'Admin123!'
PLAYER_EMAIL = 'player@example.com'
PLAYER_PASSWORD = 'Player123!'


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app()
    app.config['TESTING'] = True

    with app.app_context():
        from quizapp.auth.models import User
        from quizapp.auth.utils import ensure_admin_user, hash_password

        ensure_admin_user(ADMIN_EMAIL, ADMIN_PASSWORD)
        db.session.add(User(
            email=PLAYER_EMAIL,
            password_hash=hash_password(PLAYER_PASSWORD),
            full_name='Test Player',
            user_type='player',
        ))
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create an anonymous test client."""
    return app.test_client()


def _logged_in_client(app, email, password):
    client = app.test_client()
    response = client.post('/auth/api/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def admin_client(app):
    """Test client logged in as the admin."""
    return _logged_in_client(app, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def player_client(app):
    """Test client logged in as a player."""
    return _logged_in_client(app, PLAYER_EMAIL, PLAYER_PASSWORD)


@pytest.fixture
def seeded_quiz(app):
    """
    Persist a quiz with two questions and return their ids.

    Q1 "Capital of France?" (3 points): Paris (correct), Lyon
    Q2 "2 + 2 = ?" (2 points): 3, 4 (correct), 5
    """
    from quizapp.quiz.models import Option, Question, Quiz

    with app.app_context():
        quiz = Quiz(title='General Knowledge', description='A small test quiz')
        q1 = Question(text='Capital of France?', points=3, order_index=0)
        q1.options = [
            Option(text='Paris', is_correct=True, order_index=0),
            Option(text='Lyon', is_correct=False, order_index=1),
        ]
        q2 = Question(text='2 + 2 = ?', points=2, order_index=1)
        q2.options = [
            Option(text='3', is_correct=False, order_index=0),
            Option(text='4', is_correct=True, order_index=1),
            Option(text='5', is_correct=False, order_index=2),
        ]
        quiz.questions = [q1, q2]
        db.session.add(quiz)
        db.session.commit()

        return {
            'quiz_id': quiz.id,
            'q1': q1.id,
            'q1_correct': q1.options[0].id,
            'q1_wrong': q1.options[1].id,
            'q2': q2.id,
            'q2_correct': q2.options[1].id,
            'q2_wrong': q2.options[0].id,
            'q2_other_wrong': q2.options[2].id,
        }
