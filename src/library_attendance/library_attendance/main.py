from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, ContainerOptions, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .attendance.controller import register as register_attendance
from .faces.controller import register as register_faces
from .payroll.controller import register as register_payroll
from .profiles.controller import register as register_profiles
from .qr_sessions.controller import register as register_qr_sessions
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass a prepared container to skip MySQL wiring."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("Demo accounts ready")

        container = build_container(db_config=db_config, options=ContainerOptions.from_settings(settings))

    if container.conn is not None:
        atexit.register(container.conn.close)

    register_users(app, container)
    register_profiles(app, container)
    register_faces(app, container)
    register_qr_sessions(app, container)
    register_attendance(app, container)
    register_payroll(app, container)

    return app
