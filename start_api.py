#!/usr/bin/env python3
"""
Wait for the database, run migrations, seed, then start uvicorn.
With STORAGE_BACKEND=json only the seed step applies.
"""
import os
import sys

from app.core.config import settings
from app.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

if settings.STORAGE_BACKEND == "database":
    # 1) Wait for DB (Postgres only)
    from wait_for_db import wait_for_db
    wait_for_db(settings.DATABASE_URL)

    # 2) Run migrations using the same settings as the app
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    command.upgrade(alembic_cfg, "head")

# 3) Seed admin + legacy exports
from app.storage.factory import build_store
from app.seed import run as run_seed

store = build_store(settings)
run_seed(store)
store.close()

# 4) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)
