"""Static file serving for the ``/static/{filepath:path}`` route.

Resolves symlinks and verifies the final path is inside the configured
directory. Anything outside it, and anything that is not a regular
file, is a plain 404.
"""

import mimetypes
from pathlib import Path

import anyio

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.server.errors import not_found


class StaticFiles:
    """Route handler that serves files from a directory.

    Usage::

        app.add_route(
            "/static/{filepath:path}",
            StaticFiles("./ui/static"),
            methods=["GET"],
        )
    """

    __slots__ = ("_cache_control", "_directory", "_param")

    def __init__(
        self,
        directory: str | Path,
        *,
        param: str = "filepath",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._param = param
        self._cache_control = cache_control

    async def __call__(self, request: Request) -> Response:
        relative = request.path_params.get(self._param, "")
        if not relative or "\x00" in relative:
            return not_found()

        # resolve() and the read touch the filesystem; keep them off the event loop
        body = await anyio.to_thread.run_sync(self._read, relative)
        if body is None:
            return not_found()

        content_type, _ = mimetypes.guess_type(relative)
        if content_type is None:
            content_type = "application/octet-stream"

        return Response(
            body=body,
            content_type=content_type,
        ).with_header("Cache-Control", self._cache_control)

    def _read(self, relative: str) -> bytes | None:
        """Bytes of the regular file at *relative*, ``None`` when it is not servable."""
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory) or not file_path.is_file():
            return None
        return file_path.read_bytes()
