"""Snippet page handlers.

Thin glue: each handler reads the request, calls the model, and hands a
payload to the render helper. Every error response goes through
``server_error``, ``client_error`` or ``not_found``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snippetbox.data import NotFoundError, StoreError
from snippetbox.http.request import Request
from snippetbox.http.response import Response, redirect
from snippetbox.models.snippets import EXPIRY_DAYS, SnippetModel
from snippetbox.server.errors import not_found, server_error
from snippetbox.templating.render import new_template_data
from snippetbox.validation import max_length, one_of, required, validate

if TYPE_CHECKING:
    from snippetbox.app import App

TITLE_MAX_LENGTH = 100
DEFAULT_EXPIRES = 365

_CREATE_RULES = {
    "title": [required, max_length(TITLE_MAX_LENGTH)],
    "content": [required],
    "expires": [one_of(*(str(days) for days in sorted(EXPIRY_DAYS)))],
}


@dataclass(slots=True)
class SnippetCreateForm:
    """Create-form state, echoed back to the page on a failed submit."""

    title: str = ""
    content: str = ""
    expires: int = DEFAULT_EXPIRES
    field_errors: dict[str, str] = field(default_factory=dict)


def _parse_id(raw: str) -> int | None:
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value >= 1 else None


class SnippetHandlers:
    """Handlers for the snippet pages, bound to one app and model."""

    __slots__ = ("_app", "_logger", "_snippets")

    def __init__(
        self,
        app: App,
        snippets: SnippetModel,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._app = app
        self._snippets = snippets
        self._logger = logger or logging.getLogger("snippetbox.server")

    async def home(self, request: Request) -> Response:
        try:
            snippets = await self._snippets.latest()
        except StoreError as exc:
            return server_error(request, exc, logger=self._logger)

        data = new_template_data(request)
        data.snippets = snippets
        return self._app.render(request, "home.html", data)

    async def snippet_view(self, request: Request) -> Response:
        snippet_id = _parse_id(request.path_params.get("id", ""))
        if snippet_id is None:
            return not_found()

        try:
            snippet = await self._snippets.get(snippet_id)
        except NotFoundError:
            return not_found()
        except StoreError as exc:
            return server_error(request, exc, logger=self._logger)

        data = new_template_data(request)
        data.snippet = snippet
        return self._app.render(request, "view.html", data)

    async def snippet_create(self, request: Request) -> Response:
        data = new_template_data(request)
        data.form = SnippetCreateForm()
        return self._app.render(request, "create.html", data)

    async def snippet_create_post(self, request: Request) -> Response:
        # A malformed or non-urlencoded body raises ClientInputError (4xx)
        submitted = await request.form()
        result = validate(submitted, _CREATE_RULES)

        expires_text = submitted.get("expires") or ""
        form = SnippetCreateForm(
            title=submitted.get("title") or "",
            content=submitted.get("content") or "",
            expires=int(expires_text) if expires_text.isdigit() else 0,
        )

        if not result:
            form.field_errors = {name: result.first_error(name) for name in result.errors}
            data = new_template_data(request)
            data.form = form
            return self._app.render(request, "create.html", data, status=422)

        try:
            new_id = await self._snippets.insert(form.title, form.content, form.expires)
        except StoreError as exc:
            return server_error(request, exc, logger=self._logger)

        return redirect(f"/snippet/view/{new_id}")

    async def ping(self, request: Request) -> Response:
        return Response(body="OK", content_type="text/plain; charset=utf-8")
