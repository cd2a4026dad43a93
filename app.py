#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL (in-memory store if unset)
    CREATE_TABLES - Set to true to create the schema on startup
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.database import InMemoryMappingStore, PostgresMappingStore, RedisCache
from shortener.database.base import MappingStoreBase
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app


def build_store(config: Config, logger: logging.Logger) -> MappingStoreBase:
    """Pick the mapping store for the configuration."""
    if config.database_url:
        logger.info("Using PostgreSQL store")
        return PostgresMappingStore(
            db_config=config.database_url,
            pool_max_size=config.db_pool_max_size,
            create_tables=config.create_tables,
            logger=logger,
        )

    if config.workers > 1:
        logger.warning("In-memory store is per process; workers will not share mappings")
    logger.info("Using in-memory store")
    return InMemoryMappingStore(logger=logger)


async def build_service(config: Config, logger: logging.Logger) -> URLShortenerService:
    """Wire store, cache and generator into a service."""
    store = build_store(config, logger)

    cache = None
    if config.redis_url:
        logger.info("Connecting to Redis")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    generator = ShortCodeGenerator(
        default_length=config.short_code_length,
        strategy=config.code_strategy,
    )
    return URLShortenerService(
        store=store,
        short_code_generator=generator,
        cache=cache,
        logger=logger,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        max_collision_retries=config.max_collision_retries,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")
    service = await build_service(config, logger)
    app.state.service = service
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    # Service is attached in lifespan
    app = create_app(service_instance=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
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


if __name__ == "__main__":
    main()
