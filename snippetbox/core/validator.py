"""Form validation helpers.

Forms subclass :class:`Validator` so that decoded values and the errors found
while checking them travel together back into the template.
"""

import re
from typing import Any, Dict, List, Pattern

from pydantic import BaseModel, Field

# https://html.spec.whatwg.org/multipage/input.html#valid-e-mail-address
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])"
    r"?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\Z"
)


class Validator(BaseModel):
    """Accumulates field-keyed and non-field error messages."""

    non_field_errors: List[str] = Field(default_factory=list)
    field_errors: Dict[str, str] = Field(default_factory=dict)

    def valid(self) -> bool:
        return not self.field_errors and not self.non_field_errors

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)

    def add_field_error(self, key: str, message: str) -> None:
        # The first error recorded for a field is the one shown
        if key not in self.field_errors:
            self.field_errors[key] = message

    def check_field(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_field_error(key, message)

    @classmethod
    def form_fields(cls) -> List[str]:
        """Names of the fields decoded from a submitted form."""
        return [name for name in cls.model_fields if name not in Validator.model_fields]


def not_blank(value: str) -> bool:
    return value.strip() != ""


def max_chars(value: str, n: int) -> bool:
    # len() on str counts code points, not encoded bytes
    return len(value) <= n


def min_chars(value: str, n: int) -> bool:
    return len(value) >= n


def permitted_value(value: Any, *permitted_values: Any) -> bool:
    return value in permitted_values


def matches(value: str, rx: Pattern[str]) -> bool:
    return rx.search(value) is not None
