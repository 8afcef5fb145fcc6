from flask import current_app, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from quizapp import db
from quizapp.config import config
from quizapp.auth import auth_bp
from quizapp.auth.models import User
from quizapp.auth.utils import (
    hash_password,
    is_valid_email,
    validate_password,
    verify_password,
)
from quizapp.security import SecurityLogger


@auth_bp.route("/", methods=["GET"])
def auth_root():
    """Simple health/info endpoint for auth API."""
    base_path = config.AUTH_API_PREFIX
    return jsonify(
        {
            "status": "ok",
            "message": "Auth API is running",
            "endpoints": [
                f"{base_path}/register",
                f"{base_path}/login",
                f"{base_path}/logout",
                f"{base_path}/me",
            ],
        }
    ), 200


@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Register a player account.

    Admin accounts are not created through the API; use `flask create-admin`.
    """
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    full_name = (data.get("full_name") or "").strip()

    if not email or not password or not full_name:
        return jsonify({"success": False, "error": "Email, password, and full_name are required"}), 400

    if not is_valid_email(email):
        return jsonify({"success": False, "error": "Please provide a valid email address"}), 400

    ok, error = validate_password(password)
    if not ok:
        return jsonify({"success": False, "error": error}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"success": False, "error": "User with this email already exists"}), 409

    try:
        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            user_type="player",
        )
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error registering {email}: {str(e)}")
        return jsonify({"success": False, "error": "Could not create account"}), 500

    current_app.logger.info(f"User {user.id} registered as {user.user_type}")
    return jsonify({"success": True, "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    remember = bool(data.get("remember", False))

    if not email or not password:
        return jsonify({"success": False, "error": "Email and password are required"}), 400

    if not is_valid_email(email):
        return jsonify({"success": False, "error": "Please provide a valid email address"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        SecurityLogger.log_failed_login(email)
        return jsonify({"success": False, "error": "Invalid email or password"}), 401

    login_user(user, remember=remember)
    SecurityLogger.log_successful_login(user.id, user.email)

    return jsonify({"success": True, "user": user.to_dict()}), 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout_route():
    """Logout route."""
    logout_user()
    return jsonify({"success": True, "message": "Logged out"}), 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"success": True, "user": current_user.to_dict()}), 200
