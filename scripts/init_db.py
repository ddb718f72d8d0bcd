#!/usr/bin/env python3
"""
Create the PT Mate database schema.

Creates any missing tables for the database in DATABASE_URL. The API also
does this on startup; this script is for provisioning a database ahead of
the first deploy, or for resetting a local one.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --drop     # drop every table first (destroys data)

Requires:
    - .env file (or environment) with DATABASE_URL
"""

import sys
from pathlib import Path

# Add the project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from ptmate.config.settings import get_settings
from ptmate.infrastructure.database import (
    DatabaseConfig,
    DatabaseConnectionError,
    create_database,
)
from ptmate.infrastructure.database.tables import Base


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Create the PT Mate database schema')
    parser.add_argument('--drop', action='store_true', help='Drop all tables before creating them')
    parser.add_argument('--url', default=None, help='Database URL (defaults to DATABASE_URL)')
    args = parser.parse_args()

    settings = get_settings()
    url = args.url or settings.database_url
    database = create_database(DatabaseConfig(url=url, echo=settings.database_echo))

    try:
        database.ping()
    except DatabaseConnectionError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if args.drop:
        print("Dropping all tables...")
        database.drop_schema()

    database.create_schema()

    print("Tables:")
    for name in sorted(Base.metadata.tables):
        print(f"  {name}")

    database.dispose()
    sys.exit(0)


if __name__ == '__main__':
    main()
