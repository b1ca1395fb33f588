"""
HTTP API for aggregated search.

Provides REST endpoints for search, AI overview polling, suggestions and
image proxying.
"""

from .server import create_app, run_api_server

__all__ = ["create_app", "run_api_server"]
