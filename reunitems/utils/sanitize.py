"""
utils/sanitize.py

Utility functions and mixins for sanitizing user input to prevent XSS and unsafe HTML.
"""

import bleach
from pydantic import BaseModel, ValidationInfo, field_validator

# No HTML is allowed in any stored text field.
ALLOWED_TAGS = []
ALLOWED_ATTRIBUTES = {}

# Fields passed through untouched
UNSANITIZED_FIELDS = {"password", "id_token", "refresh_token"}


def sanitize_text(user_input: str, max_length: int = 500) -> str:
    """
    Clean user input to prevent XSS and enforce length limits.
    """
    if not user_input:
        return ""

    trimmed = user_input[:max_length]

    cleaned = bleach.clean(
        trimmed,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    return cleaned.strip()


class SanitizedModel(BaseModel):
    """
    Base model mixin that automatically sanitizes all string fields,
    except for secrets like passwords and tokens.
    Extend this in your Pydantic schemas.
    """

    @field_validator("*", mode="before")
    @classmethod
    def sanitize_all_strings(cls, v, info: ValidationInfo):
        if isinstance(v, str):
            if info.field_name in UNSANITIZED_FIELDS:
                return v
            return sanitize_text(v, max_length=1000)
        return v
