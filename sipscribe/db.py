import logging
from typing import Any, Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


engine: Engine = None  # type: ignore[assignment]
SessionLocal = None  # session factory, set by setup_db()


def _sqlite_tweaks(engine: Engine) -> None:
    """
    WAL and friends on every new connection, plus an explicit BEGIN.

    pysqlite defers BEGIN until the first DML statement, so a SAVEPOINT
    issued before that would open (and RELEASE would commit) the outer
    transaction.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        cursor.execute("PRAGMA temp_store=MEMORY;")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def setup_db(db_url: str) -> Engine:
    """
    Create the engine and the session factory, then the tables if missing.
    """
    global engine, SessionLocal
    url = make_url(db_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine_kwargs: Dict[str, Any] = {
        "echo": False,
        "future": True,
    }
    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    if engine is not None:
        engine.dispose()
    engine = create_engine(db_url, **engine_kwargs)
    if is_sqlite:
        _sqlite_tweaks(engine)

    # models must be registered on Base.metadata before create_all
    from sipscribe import models  # noqa: F401

    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    logger.info("Database ready at %s", url.render_as_string(hide_password=True))
    return engine
