from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timekeeping.timekeeping.database.bootstrap import apply_seed_sql, ensure_root_account

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    email = getattr(settings, "ROOT_EMAIL", "")
    password = getattr(settings, "ROOT_PASSWORD", "")
    if email and password:
        ensure_root_account(db_config, email=email, password=password)
    else:
        logger.warning("ROOT_EMAIL/ROOT_PASSWORD not set, root account not seeded")

    logger.info("Seeded database -> %s@%s/%s", db_config.get("user"), db_config.get("host"), db_config.get("database"))


if __name__ == "__main__":
    main()
