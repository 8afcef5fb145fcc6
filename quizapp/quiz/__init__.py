"""
Quiz module for authoring and taking multiple-choice quizzes.

Admins create quizzes, questions and options; players take a quiz and get
their score back. Validation and scoring live in plain modules
(`authoring`, `scoring`) that the routes call with loaded aggregates.
"""
from flask import Blueprint
from quizapp.config import config

quiz_bp = Blueprint('quiz', __name__, url_prefix=config.QUIZ_API_PREFIX)

from quizapp.quiz import admin_routes, player_routes  # noqa: E402,F401
