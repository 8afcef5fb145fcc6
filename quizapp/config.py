"""
Configuration module for the quiz application.
All values are read from environment variables, usually populated from a
.env file by python-dotenv.
"""
import os
import secrets
import warnings


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "")
    return value.strip().lower() == "true" if value else default


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        # Flask
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.FLASK_ENV: str = os.getenv("FLASK_ENV", "")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Outside production a missing key is replaced with a throwaway one
        if not self.SECRET_KEY and self.FLASK_ENV != "production":
            self.SECRET_KEY = secrets.token_urlsafe(32)
            warnings.warn(
                "SECRET_KEY not set. Generated a temporary key; sessions will not "
                "survive a restart. Set SECRET_KEY in your .env file.",
                UserWarning
            )

        # Database: DATABASE_URL wins over the individual MySQL settings
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "")
        self.DB_USER: str = os.getenv("DB_USER", "")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_HOST: str = os.getenv("DB_HOST", "localhost")
        self.DB_PORT: str = os.getenv("DB_PORT", "3306")
        self.DB_NAME: str = os.getenv("DB_NAME", "")

        # API prefixes
        self.AUTH_API_PREFIX: str = os.getenv("AUTH_API_PREFIX", "/auth/api")
        self.QUIZ_API_PREFIX: str = os.getenv("QUIZ_API_PREFIX", "/quiz/api")

        # Accounts
        self.MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH") or 8)

        # Default admin account, seeded by `flask create-admin`
        self.ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
        self.ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

        # Session cookie
        self.SESSION_COOKIE_SECURE: bool = _env_bool("SESSION_COOKIE_SECURE", False)
        self.SESSION_COOKIE_HTTPONLY: bool = _env_bool("SESSION_COOKIE_HTTPONLY", True)
        self.SESSION_COOKIE_SAMESITE: str = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

        # SQLAlchemy
        self.SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
        self.SQLALCHEMY_ECHO: bool = _env_bool("SQLALCHEMY_ECHO", False)

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_mysql(self) -> bool:
        return self.SQLALCHEMY_DATABASE_URI.startswith("mysql")

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: when a setting makes the app unusable
        """
        if not self.SECRET_KEY and self.FLASK_ENV == "production":
            raise ValueError("SECRET_KEY environment variable is required in production.")
        if not self.DATABASE_URL and not (self.DB_USER and self.DB_NAME):
            raise ValueError("Set DATABASE_URL, or DB_USER and DB_NAME for MySQL.")
        if self.MIN_PASSWORD_LENGTH < 1:
            raise ValueError("MIN_PASSWORD_LENGTH must be positive.")


# Re-created by create_app() after load_dotenv()
config = Config()
