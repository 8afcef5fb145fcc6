"""
Security module for the application.

Provides security event logging for authentication, role checks and
quiz submissions.
"""

from .security_logger import SecurityLogger

__all__ = [
    'SecurityLogger',
]
