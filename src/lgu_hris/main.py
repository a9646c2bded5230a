from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import AppSettings, Container, build_container
from .core.exceptions import DomainError
from .attendance.controller import register as register_attendance
from .biometrics.controller import register as register_biometrics
from .dtr.controller import register as register_dtr
from .employees.controller import register as register_employees
from .holidays.controller import register as register_holidays
from .machines.controller import register as register_machines
from .media.controller import register as register_media
from .payroll.controller import register as register_payroll
from .shifts.controller import register as register_shifts
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e)
        return jsonify({"success": False, "message": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        message = str(e) if app.config["DEBUG"] else "Internal server error"
        return jsonify({"success": False, "message": message}), 500


def load_settings():
    """Import the settings module for APP_ENV and configure logging from it."""

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    return settings


def container_from_settings(settings) -> Container:
    return build_container(
        hr201_config=getattr(settings, "HR201_DB_CONFIG"),
        dtr_config=getattr(settings, "DTR_DB_CONFIG"),
        settings=AppSettings(
            media_root=getattr(settings, "MEDIA_ROOT"),
            biometric_helper=getattr(settings, "BIOMETRIC_HELPER"),
            biometric_helper_timeout=int(getattr(settings, "BIOMETRIC_HELPER_TIMEOUT", 120)),
            machine_timeout=int(getattr(settings, "MACHINE_TIMEOUT", 5)),
            session_days=int(getattr(settings, "SESSION_DAYS", 1)),
            debug=bool(getattr(settings, "DEBUG", False)),
        ),
    )


def create_app() -> Flask:
    app = Flask(__name__)
    settings = load_settings()

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = container_from_settings(settings)
    logger.info(
        "settings=%s hr201=%s dtr=%s", settings.__name__, container.hr201.describe(), container.dtr.describe()
    )

    _register_error_handlers(app)

    register_users(app, container)
    register_employees(app, container)
    register_media(app, container)
    register_dtr(app, container)
    register_biometrics(app, container)
    register_machines(app, container)
    register_shifts(app, container)
    register_holidays(app, container)
    register_attendance(app, container)
    register_payroll(app, container)

    @app.route("/api/health", endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    return app
