from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_utils import configure_logging
from .container import EngineSettings, build_container
from .overtime.controller import register as register_overtime


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    engine_settings = EngineSettings.from_module(settings)
    configure_logging(engine_settings.log_level)
    logging.getLogger(__name__).info(
        "attendance-engine settings=%s duplicate_threshold=%ss holidays=%s",
        settings_module,
        engine_settings.duplicate_threshold_seconds,
        len(engine_settings.holidays),
    )

    container = build_container(engine_settings)
    app.extensions["attendance_engine"] = container

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"}), 200

    register_attendance(app, container)
    register_overtime(app, container)

    return app
