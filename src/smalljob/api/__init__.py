"""
HTTP API layer for smalljob.

Provides a FastAPI application factory whose routers delegate to the
scheduler core (``smalljob.core.scheduling``).  This package handles only
transport concerns: request parsing, serialisation and error mapping.

Quick start::

    from smalljob.api import create_app

    app = create_app()  # ready for uvicorn
"""

from smalljob.api.app import create_app

__all__ = ["create_app"]
