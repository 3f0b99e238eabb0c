from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from devconnect.config import config


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _get(data: Any, key: str) -> Optional[Any]:
    if isinstance(data, Mapping):
        return data.get(key)
    return getattr(data, key, None)


def validate_post_input(
    data: Any,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> ValidationResult:
    """Validate the body of a post or a comment.

    Accepts a mapping or any object exposing a ``text`` attribute (commands,
    request schemas).
    """
    min_length = config.POST_TEXT_MIN_LENGTH if min_length is None else min_length
    max_length = config.POST_TEXT_MAX_LENGTH if max_length is None else max_length

    result = ValidationResult()
    text = _get(data, "text")
    text = text.strip() if isinstance(text, str) else ""

    if not text:
        result.errors["text"] = "Text field is required"
    elif not min_length <= len(text) <= max_length:
        result.errors["text"] = f"Post must be between {min_length} and {max_length} characters"

    return result
