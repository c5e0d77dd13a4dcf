"""
Script to drop and recreate every table of the configured database.
Intended for local development only.
"""
import sys
from sqlalchemy import inspect
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401  registers every table on Base.metadata


def recreate():
    if settings.ENVIRONMENT == "production":
        print("[ERROR] Refusing to recreate the database in production")
        sys.exit(1)

    print(f"Recreating tables on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    print(f"Created tables: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    recreate()
