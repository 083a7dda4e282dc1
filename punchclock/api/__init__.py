"""Punchclock HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the Punchclock runtime HTTP surface.

Usage
-----
Create and run the application::

    from punchclock.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with domain endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with
    health endpoints and, when domain services are provided, the
    ``/api/v1`` routes.
"""

from punchclock.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
