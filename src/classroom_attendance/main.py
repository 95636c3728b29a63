from __future__ import annotations

import atexit
import importlib
from functools import partial
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.controller import register as register_api
from .common.datetime_utils import now_local, parse_iso_datetime
from .common.log import get_logger, setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_TIMEZONE, SWEEP_INTERVAL_MINUTES
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DatabaseConnection, DBConfig

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger = setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            apply_schema(conn, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(conn)))

        container = build_container(
            db_config=db_config,
            clock=partial(now_local, getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
            sweep_interval_minutes=float(getattr(settings, "SWEEP_INTERVAL_MINUTES", SWEEP_INTERVAL_MINUTES)),
        )

        if bool(getattr(settings, "SWEEP_ENABLED", False)):
            container.sweep_scheduler.start()
            atexit.register(container.sweep_scheduler.stop)

    app.extensions["attendance_container"] = container
    register_api(app, container)
    _register_cli(app, container)

    return app


def _register_cli(app: Flask, container: Container) -> None:
    log = get_logger("cli")

    @app.cli.command("sweep")
    @click.option("--at", "at_", default=None, help="Run as of this ISO datetime (civil time) instead of now.")
    def sweep_command(at_: Optional[str]) -> None:
        """Run one reconciliation sweep tick."""
        now = parse_iso_datetime(at_) if at_ else None
        report = container.sweep_scheduler.tick(now)
        if report is None:
            log.error("sweep failed, see log above")
            raise SystemExit(1)
        click.echo(report.as_dict())
