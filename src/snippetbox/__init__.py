"""snippetbox: paste and share text snippets.

A small server-rendered web app: a route table with precedence rules,
a middleware chain, a model over SQLite or PostgreSQL and a compiled
template cache rendered through a staging buffer.

Basic usage::

    from snippetbox import AppConfig, create_app

    app = create_app(AppConfig(port=4000))
    app.run()

Or from the shell::

    snippetbox --addr :4000 --dsn sqlite:///snippetbox.db
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ClientInputError",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "SnippetboxError",
    "create_app",
    "redirect",
]


_EXPORTS = {
    "App": "snippetbox.app",
    "AppConfig": "snippetbox.config",
    "create_app": "snippetbox.web",
    "Request": "snippetbox.http.request",
    "Response": "snippetbox.http.response",
    "redirect": "snippetbox.http.response",
    "Middleware": "snippetbox.middleware.protocol",
    "Next": "snippetbox.middleware.protocol",
    "ClientInputError": "snippetbox.errors",
    "ConfigurationError": "snippetbox.errors",
    "HTTPError": "snippetbox.errors",
    "MethodNotAllowed": "snippetbox.errors",
    "NotFound": "snippetbox.errors",
    "SnippetboxError": "snippetbox.errors",
}


def __getattr__(name: str) -> object:
    """Import public names on first access; ``import snippetbox`` stays cheap."""
    module = _EXPORTS.get(name)
    if module is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    from importlib import import_module

    return getattr(import_module(module), name)
