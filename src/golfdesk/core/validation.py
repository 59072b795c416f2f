"""Incremental collection of field validation errors."""

from golfdesk.core.exceptions import FieldValidationError


class ValidationErrors:
    """Collects field errors and raises them together.

    Example:
        errors = ValidationErrors()
        if not body.get("name"):
            errors.add("name", "name is required")
        errors.raise_if_any()
    """

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def add(self, field: str, message: str) -> None:
        """Record an error; the first message for a field wins."""
        self._errors.setdefault(field, message)

    def as_dict(self) -> dict[str, str]:
        return dict(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def raise_if_any(self) -> None:
        """Raise FieldValidationError carrying every collected error."""
        if self._errors:
            raise FieldValidationError(self._errors)
