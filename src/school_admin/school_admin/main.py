from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import (
    DEFAULT_ABSENCE_THRESHOLD,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_REPORT_MONTHS,
)
from .reporting.controller import register as register_reports


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(
            db_config=db_config,
            absence_threshold=int(getattr(settings, "ABSENCE_THRESHOLD", DEFAULT_ABSENCE_THRESHOLD)),
            report_months=int(getattr(settings, "REPORT_MONTHS", DEFAULT_REPORT_MONTHS)),
            cache_enabled=bool(getattr(settings, "REPORT_CACHE_ENABLED", True)),
            cache_ttl_seconds=int(getattr(settings, "REPORT_CACHE_TTL", DEFAULT_CACHE_TTL_SECONDS)),
            cache_max_entries=int(getattr(settings, "REPORT_CACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES)),
        )
        app.logger.info(
            "[school-admin] settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    register_reports(app, container)
    app.extensions["school_admin"] = container

    return app
