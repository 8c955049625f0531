import logging

from app.storage.base import Store

logger = logging.getLogger(__name__)


def build_store(cfg) -> Store:
    """Pick the storage backend once, at process start."""
    if cfg.STORAGE_BACKEND == "json":
        from app.storage.json_store import JsonFileStore
        logger.info("using JSON file storage in %s", cfg.DATA_DIR)
        return JsonFileStore(cfg.DATA_DIR)

    from app.db.session import Base, SessionLocal, engine
    from app.storage.sql_store import SqlStore
    if engine.url.get_backend_name() == "sqlite":
        # local runs skip Alembic; create the tables in place
        Base.metadata.create_all(bind=engine)
    logger.info("using database storage at %s", engine.url.render_as_string(hide_password=True))
    return SqlStore(SessionLocal)
