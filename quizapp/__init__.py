from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from dotenv import load_dotenv
from flask_migrate import Migrate
from flask_compress import Compress
import click
import logging

# Load environment variables early so config is available for blueprint creation
load_dotenv()

from quizapp.config import config

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()


def create_app() -> Flask:
    """
    Application factory for the Flask app.
    Loads environment variables, configures the database,
    and registers blueprints.
    """
    # Re-initialize config to ensure latest .env values are loaded
    from quizapp.config import Config
    global config
    config = Config()

    # Validate configuration
    config.validate()

    app = Flask(__name__)
    app.logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    # Load configuration from config module
    app.config["SECRET_KEY"] = config.SECRET_KEY
    db_uri = config.SQLALCHEMY_DATABASE_URI
    if config.is_mysql:
        if "?" not in db_uri:
            db_uri += "?charset=utf8mb4"
        # Database connection pooling for performance
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "pool_size": 10,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
            "max_overflow": 20,
            "connect_args": {
                "connect_timeout": 5,
                "charset": "utf8mb4",
            }
        }
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = config.SQLALCHEMY_TRACK_MODIFICATIONS
    app.config["SQLALCHEMY_ECHO"] = config.SQLALCHEMY_ECHO

    # Response compression settings
    app.config["COMPRESS_MIMETYPES"] = ['application/json']
    app.config["COMPRESS_LEVEL"] = 6
    app.config["COMPRESS_MIN_SIZE"] = 500  # Only compress responses > 500 bytes
    app.config["SESSION_COOKIE_SECURE"] = config.SESSION_COOKIE_SECURE
    app.config["SESSION_COOKIE_HTTPONLY"] = config.SESSION_COOKIE_HTTPONLY
    app.config["SESSION_COOKIE_SAMESITE"] = config.SESSION_COOKIE_SAMESITE

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from quizapp.auth.models import User
        try:
            return db.session.get(User, int(user_id))
        except (ValueError, TypeError):
            return None

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        app.logger.warning(f"Unauthenticated request: {request.method} {request.path}")
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    # Register blueprints
    from quizapp.auth import auth_bp
    app.register_blueprint(auth_bp)

    from quizapp.quiz import quiz_bp
    app.register_blueprint(quiz_bp)

    @app.errorhandler(404)
    def handle_404(e):
        """Return JSON for unknown routes and missing resources."""
        app.logger.warning(f"404 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Route not found: {request.method} {request.path}',
            'path': request.path,
            'method': request.method
        }), 404

    @app.errorhandler(405)
    def handle_405(e):
        app.logger.warning(f"405 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Method not allowed: {request.method} {request.path}',
            'path': request.path,
            'method': request.method
        }), 405

    @app.cli.command("create-admin")
    @click.option("--email", default=None, help="Admin email (defaults to ADMIN_EMAIL)")
    @click.option("--password", default=None, help="Admin password (defaults to ADMIN_PASSWORD)")
    def create_admin_command(email, password):
        """Create the default admin user if it does not exist yet."""
        from quizapp.auth.utils import ensure_admin_user

        email = (email or config.ADMIN_EMAIL).strip().lower()
        password = password or config.ADMIN_PASSWORD
        if not password:
            raise click.UsageError("An admin password is required (--password or ADMIN_PASSWORD).")

        user, created = ensure_admin_user(email, password)
        if created:
            click.echo(f"Admin user {user.email} created.")
        else:
            click.echo(f"Admin user {user.email} already exists.")

    # Create tables if they do not exist
    with app.app_context():
        from quizapp.auth.models import User  # noqa: F401
        from quizapp.quiz.models import Quiz, Question, Option  # noqa: F401
        db.create_all()

    return app
