from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_root_account, list_tables

from .container import Container, build_container
from .absences.controller import register as register_absences
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.http import fail
from .employees.controller import register as register_employees
from .ledger.controller import register as register_ledger
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .rules.controller import register as register_rules

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            root_email = getattr(settings, "ROOT_EMAIL", "")
            root_password = getattr(settings, "ROOT_PASSWORD", "")
            if root_email and root_password:
                ensure_root_account(db_config, email=root_email, password=root_password)
            logger.info("seed ready")

        container = build_container(
            db_config=db_config,
            deduction_rate=float(getattr(settings, "DEDUCTION_RATE", 0.05)),
            ledger_canister_id=getattr(settings, "LEDGER_CANISTER_ID", ""),
            ledger_endpoint=getattr(settings, "LEDGER_ENDPOINT", "https://ic0.app"),
            ledger_timeout=float(getattr(settings, "LEDGER_TIMEOUT_SECONDS", 10.0)),
            top_n=int(getattr(settings, "REPORT_TOP_N", 10)),
        )

    app.extensions["timekeeping"] = container

    register_auth(app, container)
    register_employees(app, container)
    register_rules(app, container)
    register_attendance(app, container)
    register_absences(app, container)
    register_reports(app, container)
    register_payroll(app, container)
    register_ledger(app, container)

    @app.errorhandler(404)
    def not_found(_):
        return fail("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_):
        return fail("Method not allowed", 405)

    return app
