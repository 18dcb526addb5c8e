"""
Server runner.

Runs the FastAPI application with uvicorn. Host and port default to the
HOST/PORT settings, so on Cloud Run no arguments are needed.

Usage:
    python -m gmail_subscriber
    python -m gmail_subscriber --port 8000 --reload
"""

import argparse

import uvicorn

from gmail_subscriber.config.settings import settings


def main():
    parser = argparse.ArgumentParser(
        description="Run the gmail-subscriber service with uvicorn"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to run the server on (default: {settings.port})"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (development only)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn"
    )

    args = parser.parse_args()

    uvicorn.run(
        "gmail_subscriber.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level
    )


if __name__ == "__main__":
    main()
