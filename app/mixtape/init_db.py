#!/usr/bin/env python3
"""
Database initialization script.
Creates all tables from the SQLAlchemy models.
"""

import argparse
import sys

from dotenv import load_dotenv
from sqlalchemy import create_engine, inspect

from mixtape.db.models import Base


def init_database(drop_existing: bool = False, assume_yes: bool = False) -> int:
    """Create the tables. Returns a process exit code."""
    from mixtape.db.session import get_db_url

    db_url = get_db_url()
    print("Connecting to database...")
    print(f"   URL: {db_url.split('@')[0]}@***")  # Hide password

    engine = create_engine(db_url)

    existing_tables = inspect(engine).get_table_names()

    if existing_tables and drop_existing:
        print(f"\nFound existing tables: {', '.join(existing_tables)}")
        if not assume_yes:
            response = input("Do you want to drop and recreate all tables? (yes/no): ")
            if response.lower() != "yes":
                print("Cancelled. No changes made.")
                return 1

        print("\nDropping all existing tables...")
        Base.metadata.drop_all(bind=engine)

    print("\nCreating tables from models...")
    Base.metadata.create_all(bind=engine)

    created_tables = inspect(engine).get_table_names()
    print(f"\nDatabase ready, {len(created_tables)} tables:")
    for table in sorted(created_tables):
        print(f"   - {table}")

    print("\nStart the API with: uvicorn mixtape.main:app --reload")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the Mixtape database tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args(argv)

    load_dotenv()
    try:
        return init_database(drop_existing=args.drop, assume_yes=args.yes)
    except Exception as e:
        print(f"\nError initializing database: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
