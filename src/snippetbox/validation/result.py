"""Validation outcome for one submitted form."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Values that passed, and messages for the fields that did not.

    Falsy when any field failed::

        result = validate(form, rules)
        if not result:
            ...  # 422 with result.errors shown next to each field
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def first_error(self, field_name: str) -> str:
        """The first message for *field_name*, or ``""`` when it passed."""
        messages = self.errors.get(field_name)
        return messages[0] if messages else ""
