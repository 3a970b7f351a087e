"""
Engine and session wiring.

One engine and one sessionmaker live in app.extensions. Read-only dashboard
handlers share a request session through `db_session()`; the customers
repository opens its own short sessions from the same sessionmaker.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from flask import Flask, current_app, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

POSTGRES_POOL = {
    "pool_recycle": 1800,
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 30,
}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(db_url: str, **overrides) -> Engine:
    kwargs: dict[str, object] = {"pool_pre_ping": True}
    if db_url.startswith("postgres"):
        kwargs.update(POSTGRES_POOL)
    kwargs.update(overrides)
    engine = create_engine(db_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def make_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    # Rows handed out by the repository outlive their session.
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(app: Flask) -> None:
    engine = make_engine(app.config["DATABASE_URL"])
    app.extensions["sqlalchemy_engine"] = engine
    app.extensions["sqlalchemy_sessionmaker"] = make_sessionmaker(engine)


def db_session() -> Session:
    """Request-scoped session, closed by teardown_db_session."""
    s = g.get("db_session")
    if s is None:
        s = g.db_session = current_app.extensions["sqlalchemy_sessionmaker"]()
    return s


def teardown_db_session(_exc: BaseException | None) -> None:
    s: Session | None = g.pop("db_session", None)
    if s is not None:
        s.close()


@contextmanager
def session_scope(app: Flask) -> Iterator[Session]:
    """Session for scripts and tests; commits on success, rolls back on error."""
    with app.extensions["sqlalchemy_sessionmaker"].begin() as s:
        yield s
