#!/usr/bin/env python3
"""
KV-Store Server Entry Point

Usage:
    python -m kvstore.server                    # Default settings (0.0.0.0:8080)
    python -m kvstore.server --port 9090        # Custom port
    python -m kvstore.server --host 127.0.0.1   # Custom host
    python -m kvstore.server --api-path /kv     # Mount routes under /kv/
    python -m kvstore.server --debug            # Enable debug logging

Environment Variables:
    KV_STORE_HOST                - Server bind address
    PORT                         - Server port
    API_PATH                     - Route prefix
    KV_STORE_MAX_BODY_SIZE       - Largest accepted request body in bytes
    KV_STORE_CONNECTION_TIMEOUT  - Idle keep-alive timeout in seconds
    KV_STORE_DEBUG               - Enable debug mode (true/false)
    KV_STORE_LOG_LEVEL           - Log level when not in debug mode
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from .config.settings import Settings
from .network.app import create_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments. Unset flags fall back to the environment."""
    parser = argparse.ArgumentParser(
        description="KV-Store: In-Memory Key-Value Store Server",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to (env KV_STORE_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port number to listen on (env PORT)",
    )

    parser.add_argument(
        "--api-path",
        type=str,
        default=None,
        help="Path prefix for all routes (env API_PATH)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug logging (env KV_STORE_DEBUG)",
    )

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Read the environment once and apply command line overrides."""
    return Settings.from_env().with_overrides(
        HOST=args.host,
        PORT=args.port,
        API_PATH=args.api_path,
        DEBUG=args.debug,
    )


def setup_logging(settings: Settings) -> None:
    """Configure logging from the debug flag and log level."""
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def build_server(settings: Settings, app: Optional[FastAPI] = None) -> uvicorn.Server:
    """
    Create the uvicorn server for settings.

    uvicorn's own logging config and access log are disabled; requests are
    logged by the access_log middleware through the root logger.
    """
    config = uvicorn.Config(
        app or create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        timeout_keep_alive=settings.CONNECTION_TIMEOUT,
        log_config=None,
        access_log=False,
    )
    return uvicorn.Server(config)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)
    settings = load_settings(args)

    setup_logging(settings)
    logger = logging.getLogger(__name__)

    logger.info("Starting KV-Store server")
    logger.info(f"  Host: {settings.HOST}")
    logger.info(f"  Port: {settings.PORT}")
    logger.info(f"  API path: {settings.API_PATH}")
    logger.info(f"  Debug: {settings.DEBUG}")

    # uvicorn installs SIGINT/SIGTERM handlers and shuts down gracefully
    build_server(settings).run()
    logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
