# quotedesk/utils/sanitize.py

import re

from email_validator import EmailNotValidError, validate_email

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")


def strip_tags(value: str) -> str:
    value = _SCRIPT_STYLE_RE.sub("", value)
    return _TAG_RE.sub("", value)


def sanitize_text_field(value: str | None) -> str:
    """Single-line text: no markup, no control characters, no line breaks."""
    if not value:
        return ""
    value = _CONTROL_RE.sub("", strip_tags(str(value)))
    return _WHITESPACE_RE.sub(" ", value).strip()


def sanitize_textarea_field(value: str | None) -> str:
    if not value:
        return ""
    value = str(value).replace("\r\n", "\n").replace("\r", "\n")
    value = _CONTROL_RE.sub("", strip_tags(value))
    return "\n".join(line.rstrip() for line in value.split("\n")).strip()


def sanitize_email(value: str | None) -> str:
    """Return the normalized address, or an empty string when it is not a valid email."""
    value = sanitize_text_field(value).replace(" ", "")
    if not value:
        return ""
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return ""
