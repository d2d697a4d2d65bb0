# finance_api/app.py

import logging

import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from . import budgets, db, goals, transactions
from .auth import auth_bp
from .config import Config
from .reports import reports_bp

# ---------------- Configuration ----------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("finance-backend")


def _register_jwt_callbacks(jwt):
    # missing credentials are a 401; anything presented but unusable is a 403
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": "Unauthorized"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning(f"Rejected token: {reason}")
        return jsonify({"error": "Invalid token"}), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token expired"}), 403


def _register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error while processing request")
        return jsonify({"error": "Internal server error"}), 500


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the database tables."""
    db.init_db()
    click.echo("Database initialized.")


# ---------------- Flask App Factory ----------------
def create_app(config_object=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.config.update(overrides)

    jwt = JWTManager(app)
    _register_jwt_callbacks(jwt)

    # CORS
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    # Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(transactions.bp)
    app.register_blueprint(budgets.bp)
    app.register_blueprint(goals.bp)
    app.register_blueprint(reports_bp)

    _register_error_handlers(app)
    app.teardown_appcontext(db.close_db)
    app.cli.add_command(init_db_command)

    with app.app_context():
        db.init_db()
        logger.info(f"Database initialized at {app.config['DB_PATH']}")

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    return app

