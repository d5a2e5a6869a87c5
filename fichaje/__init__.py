"""Flask application factory."""

from __future__ import annotations

from flask import Flask
from werkzeug.exceptions import HTTPException

from fichaje.blueprints.attendance import bp as attendance_bp
from fichaje.blueprints.main import bp as main_bp
from fichaje.config import Config
from fichaje.extensions import db


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=False)
    app.config.from_object(config_object)
    # Engine modules log under the "fichaje" namespace, same as app.logger.
    app.logger.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())

    db.init_app(app)

    # Ensure model metadata is loaded for migrations and tests.
    from fichaje import models as _models  # noqa: F401

    app.register_blueprint(main_bp)
    app.register_blueprint(attendance_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return {"error": exc.name, "description": exc.description}, exc.code

    return app
