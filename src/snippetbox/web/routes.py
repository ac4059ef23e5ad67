"""Application assembly: middleware chain and route table."""

import logging

from snippetbox.app import App
from snippetbox.config import AppConfig
from snippetbox.data import Database, migrations_for
from snippetbox.middleware import CommonHeaders, CommonHeadersConfig, Recovery, RequestLogger
from snippetbox.models.snippets import SnippetModel
from snippetbox.web.handlers import SnippetHandlers
from snippetbox.web.static import StaticFiles


def create_app(
    config: AppConfig | None = None,
    *,
    db: Database | None = None,
    logger: logging.Logger | None = None,
) -> App:
    """Build the snippetbox app.

    The middleware chain is, outermost first::

        Recovery -> RequestLogger -> CommonHeaders -> router

    When *db* is not given, one is created from ``config.dsn``. The
    bundled migrations for its dialect run at startup unless
    ``config.migrations_dir`` points elsewhere.
    """
    config = config or AppConfig()
    logger = logger or logging.getLogger("snippetbox")
    server_logger = logger.getChild("server")

    database = db or Database(config.dsn, logger=logger.getChild("data"))
    migrations = config.migrations_dir or migrations_for(database)
    app = App(config, db=database, migrations=migrations, logger=logger)

    app.add_middleware(Recovery(server_logger))
    app.add_middleware(RequestLogger(server_logger))
    app.add_middleware(CommonHeaders(CommonHeadersConfig(server=config.server_header)))

    handlers = SnippetHandlers(app, SnippetModel(database), logger=server_logger)

    app.add_route("/", handlers.home, methods=["GET"], name="home")
    if config.static_dir is not None:
        static_url = "/" + config.static_url.strip("/")
        app.add_route(
            f"{static_url}/{{filepath:path}}",
            StaticFiles(config.static_dir),
            methods=["GET"],
            name="static",
        )
    app.add_route("/snippet/view/{id}", handlers.snippet_view, methods=["GET"], name="snippet_view")
    app.add_route("/snippet/create", handlers.snippet_create, methods=["GET"], name="snippet_create")
    app.add_route(
        "/snippet/create",
        handlers.snippet_create_post,
        methods=["POST"],
        name="snippet_create_post",
    )
    app.add_route("/ping", handlers.ping, methods=["GET"], name="ping")
    return app
