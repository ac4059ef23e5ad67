"""The snippetbox application object.

An ``App`` has two phases. During setup, routes, middleware, template
helpers and lifecycle hooks are registered. The first request, lifespan
startup or ``run()`` compiles all of that into an immutable ``_Runtime``
(route table, middleware tuple, template cache); registering anything
afterwards raises ``RuntimeError``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Template

from snippetbox._internal.asgi import Receive, Scope, Send
from snippetbox._internal.invoke import invoke
from snippetbox._internal.types import Handler
from snippetbox.config import AppConfig
from snippetbox.data.database import Database
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Middleware
from snippetbox.routing.route import Route
from snippetbox.routing.router import Router
from snippetbox.server.handler import handle_request
from snippetbox.templating.cache import build_template_cache
from snippetbox.templating.render import TemplateData, render


@dataclass(frozen=True, slots=True)
class _Runtime:
    router: Router
    middleware: tuple[Middleware, ...]
    templates: Mapping[str, Template]


class App:
    """A snippetbox web application.

    Usage::

        app = App(AppConfig(template_dir=Path("ui/html")), db="sqlite:///snippetbox.db")

        @app.route("/snippet/view/{id:int}", methods=["GET"])
        async def view(request):
            ...

        app.run()
    """

    __slots__ = (
        "_compile_lock",
        "_db",
        "_globals",
        "_middleware",
        "_migrations",
        "_on_shutdown",
        "_on_startup",
        "_routes",
        "_runtime",
        "config",
        "logger",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db: Database | str | None = None,
        migrations: str | Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.logger = logger or logging.getLogger("snippetbox")
        if isinstance(db, str):
            db = Database(db, logger=self.logger.getChild("data"))
        self._db: Database | None = db
        # Applied at startup, only when a database is configured
        self._migrations = migrations

        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._globals: dict[str, Any] = {}
        self._on_startup: list[Callable[..., Any]] = []
        self._on_shutdown: list[Callable[..., Any]] = []

        self._runtime: _Runtime | None = None
        self._compile_lock = threading.Lock()

    # -- Setup --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add_route``."""

        def register(handler: Handler) -> Handler:
            self.add_route(path, handler, methods=methods, name=name)
            return handler

        return register

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> None:
        """Serve *path* with *handler*.

        *path* segments are literals, ``{name}``, ``{name:int}``, or a
        final ``{name:path}`` that takes the rest of the path. With
        ``methods=None`` the route answers every method; listing ``GET``
        also answers ``HEAD``. Conflicts are reported when the app
        compiles, not here.
        """
        self._require_setup()
        allowed = None if methods is None else frozenset(m.upper() for m in methods)
        self._routes.append(Route(path=path, handler=handler, methods=allowed, name=name))

    def add_middleware(self, middleware: Middleware) -> None:
        """Wrap the handlers in *middleware*. The first one added runs outermost."""
        self._require_setup()
        self._middleware.append(middleware)

    def template_global(self, name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Expose a function to every template under *name* (default: its own)."""

        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            self._require_setup()
            self._globals[name or func.__name__] = func
            return func

        return register

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* at startup, after the database is connected and migrated."""
        self._require_setup()
        self._on_startup.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* at shutdown, before the database disconnects."""
        self._require_setup()
        self._on_shutdown.append(func)
        return func

    # -- Runtime --

    @property
    def db(self) -> Database:
        if self._db is None:
            msg = "No database configured. Pass db= to App()."
            raise RuntimeError(msg)
        return self._db

    @property
    def templates(self) -> Mapping[str, Template]:
        """Compiled pages keyed by file name."""
        return self._compiled().templates

    def render(self, request: Request, page: str, data: TemplateData, *, status: int = 200) -> Response:
        """Render *page* with *data*; see ``templating.render.render``."""
        return render(
            request,
            self.templates,
            page,
            data,
            status=status,
            logger=self.logger.getChild("server"),
        )

    async def startup(self) -> None:
        """Compile, connect and migrate the database, then run startup hooks."""
        self._compiled()
        if self._db is not None:
            await self._db.connect()
            if self._migrations is not None:
                from snippetbox.data.migrate import migrate

                result = await migrate(self._db, self._migrations, logger=self.logger.getChild("data"))
                self.logger.info("%s", result.summary)
        for hook in self._on_startup:
            await invoke(hook)

    async def shutdown(self) -> None:
        for hook in self._on_shutdown:
            await invoke(hook)
        if self._db is not None:
            await self._db.disconnect()

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with uvicorn until interrupted."""
        self._compiled()

        from snippetbox.server.serve import run_server

        host = host or self.config.host
        port = port or self.config.port
        self.logger.info("starting server addr=%s:%d", host, port)
        run_server(self, host, port, log_level=self.config.log_level)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point for ``http`` and ``lifespan`` scopes."""
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        runtime = self._compiled()
        await handle_request(
            scope,
            receive,
            send,
            router=runtime.router,
            middleware=runtime.middleware,
            logger=self.logger.getChild("server"),
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        """Answer lifespan events until shutdown.

        A failed startup is reported as ``lifespan.startup.failed`` so
        the server exits instead of serving.
        """
        while True:
            event = (await receive())["type"]
            if event == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    self.logger.error("startup failed: %s", exc, exc_info=exc)
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif event == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Compilation --

    def _compiled(self) -> _Runtime:
        if self._runtime is None:
            with self._compile_lock:
                if self._runtime is None:
                    self._runtime = self._compile()
        return self._runtime

    def _compile(self) -> _Runtime:
        """Build the route table and template cache.

        Raises ``ConfigurationError`` for conflicting routes or broken
        templates.
        """
        router = Router()
        for route in self._routes:
            router.add(route)
        router.compile()

        templates: Mapping[str, Template] = {}
        if self.config.template_dir is not None:
            templates = build_template_cache(self.config.template_dir, globals_=self._globals)

        return _Runtime(router=router, middleware=tuple(self._middleware), templates=templates)

    def _require_setup(self) -> None:
        if self._runtime is not None:
            msg = (
                "Cannot modify the app after it has started. "
                "Register routes, middleware and hooks before the first request."
            )
            raise RuntimeError(msg)
