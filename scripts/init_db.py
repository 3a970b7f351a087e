"""
Create all tables straight from the SQLAlchemy metadata (dev / sqlite).

Production databases are migrated with Alembic instead (scripts/release.py).

Usage:
    python scripts/init_db.py            # create tables
    python scripts/init_db.py --seed     # create tables and load sample data
"""
import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.bizdash.models import Base  # noqa: E402
from scripts._db_utils import create_script_engine, database_url_from_env, script_session  # noqa: E402


def create_tables(database_url: str | None = None) -> str:
    db_url = (database_url or database_url_from_env()).strip()
    engine = create_script_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    return db_url


def main() -> int:
    parser = argparse.ArgumentParser(description="Create database tables from the model metadata.")
    parser.add_argument("--seed", action="store_true", help="also insert sample customers, products and sales")
    args = parser.parse_args()

    db_url = create_tables()
    print(f"Tables created ({db_url.split('://', 1)[0]}).")

    if args.seed:
        from scripts.seed import seed

        with script_session(db_url) as s:
            added = seed(s)
        print(f"Seeded: {added}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
