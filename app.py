#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served on one event loop per worker (FastAPI +
asyncpg connection pool). Set SHORTENER_WORKERS > 1 for multi-process scaling
(each worker has its own DB pool).

Usage:
    python app.py

Environment variables (all prefixed with SHORTENER_):
    DB_USER, DB_PASSWORD, DB_HOST, DB_PORT, DB_NAME - Database connection
    DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE - Connection pool sizing
    DB_DISABLE_TLS - Connect without TLS
    DB_CREATE_TABLES - Set to true to create the urls table at startup
    HOST, PORT - Address to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    REQUEST_TIMEOUT_SECONDS - Deadline for database calls per request
    SHUTDOWN_TIMEOUT_SECONDS - Grace period for outstanding requests
    BUILD - Version reported by /liveness
    LOG_LEVEL, LOG_FILE, LOG_JSON - Logging
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.common.logging_config import setup_logging
from shortener.database.postgres import PostgresURLStore
from shortener.engine import ShortenerEngine
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info(f"Starting URL shortener service, version {config.build}")

    # A database that cannot be reached at startup is fatal
    logger.info(f"Connecting to PostgreSQL at {config.db_host}:{config.db_port}/{config.db_name}")
    store = PostgresURLStore.from_config(config, logger=logger)
    await store.connect()

    engine = ShortenerEngine(
        store=store,
        logger=logger,
        default_timeout=config.request_timeout_seconds,
    )

    app.state.engine = engine

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await engine.close()
    logger.info("Service stopped")


def build_app(config: Config) -> FastAPI:
    """Create the FastAPI app with its logger and lifespan attached."""
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    app = create_app(engine=None, config=config, lifespan=lifespan)
    app.state.logger = logger
    return app


def main():
    """Main entry point."""
    config = load_config()
    app = build_app(config)
    logger = app.state.logger

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.safe_dump()}")

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
        timeout_graceful_shutdown=config.shutdown_timeout_seconds,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    # uvicorn reports a failed lifespan startup by exiting run() early
    if not server.started:
        logger.error("Startup failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
