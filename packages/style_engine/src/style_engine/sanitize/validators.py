"""Per-type validators.

A validator receives the descriptor and the raw value and returns the coerced
value, or raises ``FieldRejected``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from style_engine.models.options import OptionDescriptor, OptionType
from style_engine.sanitize.models import ValidationReason

Validator = Callable[[OptionDescriptor, Any], Any]

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
RGB_COLOR = re.compile(r"^rgba?\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*(?:,\s*[\d.]+)?\s*\)$")
COLOR_KEYWORDS = frozenset({"transparent", "inherit", "initial", "unset", "currentcolor"})
TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
FALSE_STRINGS = frozenset({"0", "false", "no", "off", ""})
INT_PATTERN = re.compile(r"^[+-]?\d+$")


class FieldRejected(Exception):  # noqa: N818 - internal control flow
    """Raised by validators to reject a single field."""

    def __init__(self, reason: ValidationReason, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def _require_str(descriptor: OptionDescriptor, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise FieldRejected(
        ValidationReason.TYPE_MISMATCH,
        f"{descriptor.key} expects a string, got {type(value).__name__}",
    )


def _check_length(descriptor: OptionDescriptor, value: str) -> str:
    if descriptor.max_length is not None and len(value) > descriptor.max_length:
        raise FieldRejected(
            ValidationReason.OUT_OF_RANGE,
            f"{descriptor.key} exceeds {descriptor.max_length} characters",
        )
    return value


def validate_color(descriptor: OptionDescriptor, value: Any) -> str:
    """Accept hex, rgb()/rgba() and CSS color keywords."""
    text = _require_str(descriptor, value).strip()
    if HEX_COLOR.match(text) or RGB_COLOR.match(text) or text.lower() in COLOR_KEYWORDS:
        return text
    raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key} is not a valid color")


def validate_number(descriptor: OptionDescriptor, value: Any) -> int | float:
    """Coerce numeric strings and enforce min/max."""
    if isinstance(value, bool):
        raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key} expects a number")
    if isinstance(value, str):
        text = value.strip()
        try:
            number: int | float = int(text) if INT_PATTERN.match(text) else float(text)
        except ValueError as exc:
            raise FieldRejected(
                ValidationReason.TYPE_MISMATCH, f"{descriptor.key} is not numeric"
            ) from exc
    elif isinstance(value, int | float):
        number = value
    else:
        raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key} expects a number")
    if isinstance(number, float):
        if not math.isfinite(number):
            raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key} is not finite")
        if number.is_integer() and isinstance(descriptor.default, int):
            number = int(number)
    if descriptor.minimum is not None and number < descriptor.minimum:
        raise FieldRejected(
            ValidationReason.OUT_OF_RANGE, f"{descriptor.key} is below {descriptor.minimum}"
        )
    if descriptor.maximum is not None and number > descriptor.maximum:
        raise FieldRejected(
            ValidationReason.OUT_OF_RANGE, f"{descriptor.key} is above {descriptor.maximum}"
        )
    return number


def validate_boolean(descriptor: OptionDescriptor, value: Any) -> bool:
    """Accept booleans, 0/1, and the usual string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key} expects a boolean")


def validate_text(descriptor: OptionDescriptor, value: Any) -> str:
    """Accept strings (numbers are stringified) within the length limit."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        value = str(value)
    return _check_length(descriptor, _require_str(descriptor, value))


def validate_choice(descriptor: OptionDescriptor, value: Any) -> str:
    """Require membership in the declared choices."""
    text = _require_str(descriptor, value).strip()
    if text not in descriptor.choices:
        raise FieldRejected(
            ValidationReason.OUT_OF_RANGE,
            f"{descriptor.key} must be one of {', '.join(descriptor.choices)}",
        )
    return text


def css_syntax_problem(css: str) -> str | None:
    """Return a description of the first structural problem, or None."""
    depth = 0
    parens = 0
    index = 0
    quote: str | None = None
    while index < len(css):
        char = css[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif css.startswith("/*", index):
            end = css.find("*/", index + 2)
            if end == -1:
                return "unterminated comment"
            index = end + 2
            continue
        elif char in "\"'":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return "unexpected '}'"
        elif char == "(":
            parens += 1
        elif char == ")":
            parens -= 1
            if parens < 0:
                return "unexpected ')'"
        index += 1
    if quote:
        return "unterminated string"
    if depth:
        return "unbalanced braces"
    if parens:
        return "unbalanced parentheses"
    return None


def validate_freeform_css(descriptor: OptionDescriptor, value: Any) -> str:
    """Check length and basic structural sanity of a CSS fragment."""
    css = _check_length(descriptor, _require_str(descriptor, value))
    problem = css_syntax_problem(css)
    if problem:
        raise FieldRejected(ValidationReason.TYPE_MISMATCH, f"{descriptor.key}: {problem}")
    return css


DEFAULT_VALIDATORS: dict[str, Validator] = {
    OptionType.COLOR.value: validate_color,
    OptionType.NUMBER.value: validate_number,
    OptionType.BOOLEAN.value: validate_boolean,
    OptionType.TEXT.value: validate_text,
    OptionType.CHOICE.value: validate_choice,
    OptionType.FREEFORM_CSS.value: validate_freeform_css,
}
