"""
Security logging module.

Logs authentication events, role violations and tampered quiz
submissions for monitoring and auditing.
"""

from flask import request, current_app
from datetime import datetime


class SecurityLogger:
    """
    Security event logger.

    Every message is prefixed with ``SECURITY:`` and carries the client IP
    and the UTC time of the event.
    """

    @staticmethod
    def _context() -> str:
        return f"IP: {request.remote_addr}, Time: {datetime.utcnow().isoformat()}"

    @staticmethod
    def log_failed_login(email: str, reason: str = "Invalid credentials"):
        """
        Log a failed login attempt.

        Args:
            email: Email address used in login attempt
            reason: Reason for failure
        """
        current_app.logger.warning(
            f"SECURITY: Failed login attempt - Email: {email}, "
            f"Reason: {reason}, {SecurityLogger._context()}"
        )

    @staticmethod
    def log_successful_login(user_id: int, email: str):
        current_app.logger.info(
            f"SECURITY: Successful login - User ID: {user_id}, "
            f"Email: {email}, {SecurityLogger._context()}"
        )

    @staticmethod
    def log_unauthorized_access(resource: str, user_id: int = None):
        """
        Log an access attempt to a resource the user's role does not allow.

        Args:
            resource: Resource that was accessed
            user_id: User ID if authenticated
        """
        user_info = f"User ID: {user_id}" if user_id else "Unauthenticated"
        current_app.logger.warning(
            f"SECURITY: Unauthorized access - {user_info}, "
            f"Resource: {resource}, {SecurityLogger._context()}"
        )

    @staticmethod
    def log_invalid_answer_reference(quiz_id: int, question_id: int, option_id, user_id: int = None):
        """
        Log a submitted answer whose option does not belong to its question.

        This usually means stale or hand-crafted form data.
        """
        current_app.logger.warning(
            f"SECURITY: Invalid answer reference - User ID: {user_id}, "
            f"Quiz: {quiz_id}, Question: {question_id}, Option: {option_id!r}, "
            f"{SecurityLogger._context()}"
        )
