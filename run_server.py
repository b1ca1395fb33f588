#!/usr/bin/env python3
"""
Search Fusion - HTTP Server

Runs the aggregated search API with uvicorn.

Usage:
    # Local only (default)
    python run_server.py

    # Listen on all interfaces
    python run_server.py --host 0.0.0.0 --port 8765

Environment Variables:
    GOOGLE_API_KEY / GOOGLE_SEARCH_ENGINE_ID: Google Custom Search credentials
    BRAVE_API_KEY: Brave Search subscription token(s)
    LLM_API_KEY: Language model key(s) for AI overviews
    SEARCH_API_HOST: Server host (default: 127.0.0.1)
    SEARCH_API_PORT: Server port (default: 8765)
"""

import argparse
import logging
import os
import sys

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from search_fusion.config import Settings

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main():
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Run the Search Fusion HTTP API")
    parser.add_argument("--host", default=settings.api_host, help=f"Server host (default: {settings.api_host})")
    parser.add_argument("--port", type=int, default=settings.api_port, help=f"Server port (default: {settings.api_port})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    logger.info(f"Starting Search Fusion on http://{args.host}:{args.port}")
    logger.info(f"Configuration: {settings.describe()}")

    import uvicorn

    uvicorn.run(
        "search_fusion.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
