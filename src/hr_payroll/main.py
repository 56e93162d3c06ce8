from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import load_settings

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from .core.policy import HrPolicy
from .database.bootstrap import apply_schema, verify_schema
from .database.connection import DBConfig
from .leave.controller import register as register_leave
from .logging_config import configure_logging, get_logger
from .payroll.controller import register as register_payroll

logger = get_logger("main")

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def on_validation(exc: ValidationError):
        return jsonify({"message": str(exc)}), 400

    @app.errorhandler(AuthorizationError)
    def on_forbidden(exc: AuthorizationError):
        return jsonify({"message": str(exc)}), 403

    @app.errorhandler(NotFoundError)
    def on_not_found(exc: NotFoundError):
        return jsonify({"message": str(exc)}), 404

    @app.errorhandler(DomainError)
    def on_domain(exc: DomainError):
        return jsonify({"message": str(exc)}), 422

    @app.errorhandler(HTTPException)
    def on_http(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings()
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT", "text"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("starting", extra={"settings": settings.__name__, "db": DBConfig.from_dict(db_config).dsn})
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready", extra={"tables": len(verify_schema(db_config))})
        container = build_container(db_config=db_config, policy=HrPolicy.from_settings(settings))

    _register_error_handlers(app)
    register_attendance(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    return app
