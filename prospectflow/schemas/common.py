"""
Validation helpers shared by the request schemas.
"""
from typing import List, Optional
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

_http_url = TypeAdapter(AnyHttpUrl)


def validate_optional_url(value: Optional[str]) -> Optional[str]:
    """Accept an http(s) URL or an empty value (stored as None)."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid URL")
    return value


def clean_tags(tags: Optional[List[str]]) -> List[str]:
    """Strip tags, drop blanks and duplicates while keeping order."""
    cleaned: List[str] = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def required_text(value: Optional[str]) -> Optional[str]:
    """Strip a required text field and reject blanks. None is left for partial updates."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Must not be blank")
    return value
