from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import get_settings

Base = declarative_base()


def configure_sqlite(engine: Engine) -> Engine:
    """
    Make pysqlite honour SAVEPOINT and foreign keys.

    The driver normally opens transactions lazily on its own; here it is put
    in autocommit mode and SQLAlchemy emits BEGIN itself, so nested
    transactions (used by fee generation) roll back only what they wrapped.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def build_engine(url: str, echo: bool = False, timeout: float = 5.0) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )
        return configure_sqlite(engine)
    return create_engine(url, echo=echo, pool_pre_ping=True)


_settings = get_settings()
engine = build_engine(_settings.database_url, _settings.sql_echo, _settings.db_timeout_seconds)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
