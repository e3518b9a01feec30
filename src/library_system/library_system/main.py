from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, session

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.exceptions import RemoteStoreError
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .users.controller import register as register_users

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass a prebuilt container to skip database setup (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["QR_TOKEN"] = getattr(settings, "QR_TOKEN", "LIBRARY_CHECKIN")
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if app.config["DEBUG"]:
            print("[library-system] settings=", settings_module, " db=", DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[library-system] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            if app.config["DEBUG"]:
                print("[library-system] demo accounts ready")

        container = build_container(db_config=db_config)

    app.extensions["library_container"] = container

    @app.before_request
    def load_current_user():
        # Role and name are re-read on every request; the session only holds the id.
        g.current_user = None
        user_id = session.get("user_id")
        if not user_id:
            return
        try:
            g.current_user = container.auth_service.get_session_user(int(user_id))
        except RemoteStoreError:
            app.logger.exception("Failed to resolve session user %s", user_id)
            return
        if g.current_user is None:
            session.clear()

    @app.context_processor
    def inject_globals():
        return {"current_user": g.get("current_user"), "csrf_token": lambda: ""}

    register_users(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_settings(app, container)

    return app
