"""The snippetbox web application: handlers, static files and the route table."""

from snippetbox.web.routes import create_app

__all__ = ["create_app"]
