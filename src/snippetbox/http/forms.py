"""URL-encoded form bodies.

The snippet forms never upload files, so ``multipart/form-data`` is
rejected rather than parsed.
"""

from urllib.parse import parse_qs

from snippetbox.errors import ClientInputError
from snippetbox.http.multidict import MultiDict

URLENCODED = "application/x-www-form-urlencoded"


class FormData(MultiDict):
    """Submitted form fields.

    Usage::

        form = await request.form()
        title = form.get("title", "")
        tags = form.get_list("tag")
    """

    __slots__ = ()


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse an urlencoded request body.

    Raises ``ClientInputError`` with 415 for any other media type and
    with 400 when the body, or any percent-escaped value in it, is not
    UTF-8.
    """
    media_type = content_type.partition(";")[0].strip().lower()
    if media_type != URLENCODED:
        raise ClientInputError(415, f"Unsupported form encoding: {media_type}")
    try:
        # A bad escape such as %FF raises instead of decoding to U+FFFD
        fields = parse_qs(body.decode("utf-8"), keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as exc:
        raise ClientInputError(400, "Form body is not valid UTF-8") from exc
    return FormData(fields)
