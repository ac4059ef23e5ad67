"""Form validation: per-field rule lists, one result object.

Usage::

    from snippetbox.validation import validate, required, max_length, one_of

    form = await request.form()
    result = validate(form, {
        "title": [required, max_length(100)],
        "content": [required],
        "expires": [one_of("1", "7", "365")],
    })
    if not result:
        ...  # re-render with result.errors
"""

from collections.abc import Mapping, Sequence

from snippetbox.validation.result import ValidationResult
from snippetbox.validation.rules import Validator, max_length, one_of, required

__all__ = [
    "ValidationResult",
    "Validator",
    "max_length",
    "one_of",
    "required",
    "validate",
]


def _check(value: str, validators: Sequence[Validator]) -> list[str]:
    messages: list[str] = []
    for validator in validators:
        message = validator(value)
        if message is None:
            continue
        messages.append(message)
        # Blank fields report only the blank message
        if validator is required:
            break
    return messages


def validate(data: Mapping[str, str], rules: Mapping[str, Sequence[Validator]]) -> ValidationResult:
    """Run each field's rules against *data*.

    A field missing from *data* is checked as ``""``. Fields with no
    messages land in ``result.data``, the rest in ``result.errors``.
    """
    result = ValidationResult(data={}, errors={})
    for name, validators in rules.items():
        value = data.get(name) or ""
        messages = _check(value, validators)
        if messages:
            result.errors[name] = messages
        else:
            result.data[name] = value
    return result
