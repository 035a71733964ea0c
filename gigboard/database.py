import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.orm import sessionmaker, declarative_base

from gigboard.config import settings

logger = logging.getLogger(__name__)


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # Request threads share the file; FKs are off by default in SQLite.
        eng = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
        return eng
    return create_engine(url, pool_pre_ping=True)


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = _build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from gigboard.models import Profile, Job, Application, Message  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized")
    except Exception as e:
        logger.exception("Database initialization failed: %s", e)
        raise


def ensure_tables_exist():
    """Create any missing tables without touching existing data."""
    from gigboard.models import Profile, Job, Application, Message  # noqa: F401

    try:
        inspector = inspect(engine)
        existing_tables = set(inspector.get_table_names())

        Base.metadata.create_all(bind=engine)
        target_tables = set(Base.metadata.tables.keys())
        created_tables = sorted(target_tables - existing_tables)

        if created_tables:
            logger.info("Created missing DB tables: %s", ", ".join(created_tables))
        else:
            logger.info("All DB tables already exist; no schema changes applied.")
    except Exception as e:
        logger.exception("Ensure tables failed: %s", e)
        raise
