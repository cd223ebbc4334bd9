"""Commerce database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from commerce.config import get_settings
from commerce.utils.logging import configure_logging, get_logger


def _domain():
    from commerce.domain import commerce

    commerce.init()
    return commerce


def setup_databases():
    from commerce.utils.db import setup_db

    providers = setup_db(_domain())
    get_logger(__name__).info("schema_created", providers=providers)


def drop_databases():
    from commerce.utils.db import drop_db

    providers = drop_db(_domain())
    get_logger(__name__).info("schema_dropped", providers=providers)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Commerce database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)
    configure_logging(get_settings())

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
