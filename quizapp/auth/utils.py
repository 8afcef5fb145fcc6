import re

from passlib.hash import bcrypt

from quizapp import db
from quizapp.config import config


EMAIL_REGEX = re.compile(r"^[^@]+@[^@]+\.[^@]+$")


def _truncate_password(plain_password: str) -> str:
    """Helper to consistently truncate password to its first 72 UTF-8 bytes."""
    password_bytes = plain_password.encode('utf-8')[:72]
    return password_bytes.decode('utf-8', errors='ignore')


def hash_password(plain_password: str) -> str:
    """
    Hash password using bcrypt. It is truncated to the first 72 bytes
    of its UTF-8 encoding before hashing.
    """
    return bcrypt.hash(_truncate_password(plain_password))


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a password against a hash, using the same truncation as hash_password."""
    return bcrypt.verify(_truncate_password(plain_password), password_hash)


def is_valid_email(email: str) -> bool:
    return bool(email and EMAIL_REGEX.match(email))


def validate_password(password: str) -> tuple[bool, str | None]:
    """
    Basic server-side password validation.
    Returns (is_valid, error_message).
    """
    min_length = config.MIN_PASSWORD_LENGTH
    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters long"
    return True, None


def ensure_admin_user(email: str, password: str, full_name: str = "Administrator"):
    """
    Create an admin account unless a user with that email already exists.

    Returns:
        (user, created) tuple
    """
    from quizapp.auth.models import User

    user = User.query.filter_by(email=email).first()
    if user:
        return user, False

    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=full_name,
        user_type="admin",
    )
    db.session.add(user)
    db.session.commit()
    return user, True
