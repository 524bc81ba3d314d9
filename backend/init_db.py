"""
Tiny DB bootstrap script for the transactions API.

- Reads TXN_DB_URL (or falls back to the default in transactions_api.config).
- Creates all tables defined in transactions_api.db.Base metadata.

Usage (from backend/):
  python init_db.py
"""

from transactions_api.config import Settings
from transactions_api.db import Base, build_engine
from transactions_api import models  # noqa: F401  - ensure models are imported so metadata is populated


def main() -> None:
    settings = Settings.load()
    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    print("Transaction tables created (or already exist).")


if __name__ == "__main__":
    main()
