"""Back-office database management CLI.

Creates or drops the Customers, Products and Orders tables in the storage
backend chosen by STORAGE_BACKEND / DATABASE_URI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the store tables."""
    from backoffice.domain import backoffice
    from backoffice.utils.db import setup_db, table_names

    print("Initializing backoffice domain...")
    backoffice.init()
    print(f"Creating tables: {', '.join(table_names())}...")
    setup_db(backoffice)
    print("Done.")


def drop_databases():
    """Drop the store tables."""
    from backoffice.domain import backoffice
    from backoffice.utils.db import drop_db, table_names

    print("Initializing backoffice domain...")
    backoffice.init()
    print(f"Dropping tables: {', '.join(table_names())}...")
    drop_db(backoffice)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Back-office database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
