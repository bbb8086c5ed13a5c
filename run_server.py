#!/usr/bin/env python3
"""
Locshare Backend Server Startup Script
"""
import argparse
import logging
import sys

import uvicorn
from pymongo.errors import ConfigurationError, InvalidURI
from pymongo.uri_parser import parse_uri

from config import settings
from locshare.errors import StoreUnavailable
from locshare.utils import ConnectionHandle, configure_logging

logger = logging.getLogger("run_server")


def check_store(uri: str) -> None:
    """Fail fast when the store is misconfigured or unreachable"""
    if not uri:
        raise StoreUnavailable("MONGODB_URI is required")
    try:
        parse_uri(uri)
    except (ConfigurationError, InvalidURI) as e:
        raise StoreUnavailable(f"Invalid MONGODB_URI: {e}") from e

    handle = ConnectionHandle(
        uri,
        database=settings.mongodb_database,
        collection=settings.mongodb_collection,
        connect_timeout_ms=settings.mongodb_connect_timeout_ms,
    )
    try:
        handle.get()
        logger.info("MongoDB connected, database: %s", handle.database_name)
    finally:
        handle.close()


def main():
    parser = argparse.ArgumentParser(description="Locshare Backend Server")
    parser.add_argument("--host", default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument("--debug", action="store_true", default=settings.debug, help="Enable debug mode")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--skip-store-check", action="store_true",
                        help="Start without verifying the document store first")
    
    args = parser.parse_args()
    
    configure_logging(settings)
    
    if not args.skip_store_check:
        try:
            check_store(settings.mongodb_uri)
        except StoreUnavailable as e:
            logger.error("MongoDB connection error: %s", e)
            sys.exit(1)
    
    logger.info("Server running on %s:%s (debug=%s, reload=%s, workers=%s)",
                args.host, args.port, args.debug, args.reload, args.workers)
    
    uvicorn.run(
        "locshare.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level="debug" if args.debug else "info",
        access_log=True
    )


if __name__ == "__main__":
    main()
