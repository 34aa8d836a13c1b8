"""Create or reset the configured database schema without Alembic."""

from __future__ import annotations

import argparse
import logging

from veilpost.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def init_db(*, reset: bool = False) -> None:
    """Initialize the database by creating all tables."""
    if reset:
        drop_tables()
    create_tables()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    init_db(reset=args.reset)
    logger.info("Database initialized.")


if __name__ == "__main__":
    main()
