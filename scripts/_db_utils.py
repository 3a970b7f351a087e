from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from app.bizdash.db import make_engine, make_sessionmaker


def database_url_from_env(default: str = "sqlite:///bizdash.db") -> str:
    return (os.environ.get("DATABASE_URL") or default).strip()


def create_script_engine(db_url: str):
    # Scripts run once and exit; a long recycle window is enough.
    return make_engine(db_url, pool_recycle=1800)


@contextmanager
def script_session(db_url: str) -> Iterator[Session]:
    engine = create_script_engine(db_url)
    try:
        with make_sessionmaker(engine).begin() as s:
            yield s
    finally:
        engine.dispose()
