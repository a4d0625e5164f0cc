from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .common.logging_config import setup_logging
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import BACKEND_MYSQL, Container, build_container
from .core.constants import CLOCK_SKEW_SECONDS
from .cycles.controller import register as register_cycles
from .database.bootstrap import apply_schema, list_tables
from .nominations.controller import register as register_nominations
from .results.controller import register as register_results
from .users.controller import register as register_users
from .votes.controller import register as register_votes

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")
    backend = str(getattr(settings, "STORAGE_BACKEND", BACKEND_MYSQL)).lower()

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s backend=%s db=%s@%s:%s/%s",
        settings_module,
        backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if backend == BACKEND_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            backend=backend,
            clock_skew_seconds=int(getattr(settings, "CLOCK_SKEW_SECONDS", CLOCK_SKEW_SECONDS)),
        )

    app.extensions["container"] = container
    register_error_handlers(app)

    register_users(app, container)
    register_cycles(app, container)
    register_nominations(app, container)
    register_votes(app, container)
    register_results(app, container)

    return app
