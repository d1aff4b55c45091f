"""Input validation helpers. Each returns the cleaned value or raises ValidationError."""

import enum
from typing import Type, TypeVar

from featureboard.errors import ValidationError

BOARD_NAME_MAX = 255
TITLE_MAX = 255
COMMENT_MAX = 1000

E = TypeVar("E", bound=enum.Enum)


def validate_board_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Board name cannot be empty")
    if len(name) > BOARD_NAME_MAX:
        raise ValidationError(f"Board name cannot exceed {BOARD_NAME_MAX} characters")
    return name


def validate_feedback(title: str, description: str, category_id: int) -> tuple:
    title = (title or "").strip()
    description = (description or "").strip()
    if not title:
        raise ValidationError("Title cannot be empty")
    if len(title) > TITLE_MAX:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX} characters")
    if not description:
        raise ValidationError("Description cannot be empty")
    if category_id is None or category_id <= 0:
        raise ValidationError("Invalid category ID")
    return title, description, category_id


def validate_comment(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment cannot be empty")
    if len(content) > COMMENT_MAX:
        raise ValidationError(f"Comment cannot exceed {COMMENT_MAX} characters")
    return content


def parse_choice(enum_cls: Type[E], value: str, label: str) -> E:
    """Map a raw string onto ``enum_cls`` by value."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'; expected one of: {allowed}")
