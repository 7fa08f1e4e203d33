#!/usr/bin/env python3
"""
Manually initialize the PostgreSQL urls table for URL shortener.

Connection settings are read from the same SHORTENER_DB_* environment
variables as the service; flags override them.

Usage:
    python init_postgres_database.py --db-host localhost --db-name postgres
"""

import argparse
import asyncio
import os
import sys

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from config import load_config
from shortener.common.logging_config import setup_logging
from shortener.database.postgres import PostgresURLStore
from shortener.errors import StoreError


async def main():
    config = load_config()

    parser = argparse.ArgumentParser(description="Initialize PostgreSQL tables")
    parser.add_argument("--db-host", default=config.db_host, help="Database host")
    parser.add_argument("--db-port", type=int, default=config.db_port, help="Database port")
    parser.add_argument("--db-name", default=config.db_name, help="Database name")
    parser.add_argument("--db-user", default=config.db_user, help="Database user")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    config = config.model_copy(update={
        "db_host": args.db_host,
        "db_port": args.db_port,
        "db_name": args.db_name,
        "db_user": args.db_user,
        "db_create_tables": False,
    })
    db = PostgresURLStore.from_config(config, logger=logger)

    try:
        logger.info("Connecting to PostgreSQL...")
        await db.connect()

        logger.info("Initializing database tables...")
        await db.ensure_tables()
        logger.info("Tables initialized successfully")

        if not await db.health_check():
            logger.error("Database health check failed")
            return 1
        logger.info("Database health check passed")

        logger.info("Done")
        return 0

    except StoreError as e:
        logger.error(f"Error initializing tables: {e}")
        return 1

    finally:
        await db.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
