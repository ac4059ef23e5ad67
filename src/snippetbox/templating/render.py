"""Staged page rendering.

A page is rendered into a private buffer first. The Response, and so
the status line, only exists once the whole page has rendered; a
failure part-way through produces a clean 500 instead of a truncated
page with a success status.
"""

import io
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Any

from jinja2 import Template

from snippetbox.errors import ConfigurationError
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.server.errors import logger as server_logger
from snippetbox.server.errors import server_error


@dataclass(slots=True)
class TemplateData:
    """Per-request render payload. Never shared between requests."""

    current_year: int
    snippet: Any = None
    snippets: list[Any] = field(default_factory=list)
    form: Any = None
    flash: str = ""

    def context(self) -> dict[str, Any]:
        """Template variables, one per field."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def new_template_data(request: Request) -> TemplateData:
    """Build a fresh payload with the process-wide values filled in."""
    return TemplateData(current_year=datetime.now(UTC).year)


def render(
    request: Request,
    templates: Mapping[str, Template],
    page: str,
    data: TemplateData,
    *,
    status: int = 200,
    logger: logging.Logger = server_logger,
) -> Response:
    """Render *page* with *data* and return the finished Response.

    A page missing from *templates* is a programming error and goes to
    the server-error path, never to a 404.
    """
    template = templates.get(page)
    if template is None:
        exc = ConfigurationError(f"The template {page!r} does not exist")
        return server_error(request, exc, logger=logger)

    buf = io.StringIO()
    try:
        for chunk in template.generate(data.context()):
            buf.write(chunk)
    except Exception as exc:
        return server_error(request, exc, logger=logger)

    return Response(body=buf.getvalue(), status=status)
