"""String sanitization helpers: tag/script stripping, HTML and LIKE escaping, slugs."""

import re

_ANGLE_BRACKETS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_HTML_SPECIALS = re.compile(r"[&<>\"'/]")

# Escape character used with ILIKE ... ESCAPE '\'.
LIKE_ESCAPE_CHAR = "\\"

# Turkish letters mapped to their closest ASCII form.
_SLUG_TRANSLITERATION = str.maketrans(
    {"ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c"}
)
_SLUG_INVALID = re.compile(r"[^a-z0-9\s-]")
_SLUG_WHITESPACE = re.compile(r"\s+")
_SLUG_DASHES = re.compile(r"-+")


def sanitize_input(value: object) -> str:
    """
    Strip characters and patterns commonly used for markup injection.

    Removes '<' and '>', any 'javascript:' protocol and inline event handler
    attributes such as 'onclick=', then trims. Non-strings become ''.
    """
    if not isinstance(value, str):
        return ""
    value = _ANGLE_BRACKETS.sub("", value)
    value = _JS_PROTOCOL.sub("", value)
    value = _EVENT_HANDLER.sub("", value)
    return value.strip()


def escape_html(text: object) -> str:
    """Escape & < > \" ' / for safe inclusion in HTML. Non-strings become ''."""
    if not isinstance(text, str):
        return ""
    return _HTML_SPECIALS.sub(lambda m: _HTML_ESCAPES[m.group(0)], text)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards (% and _) and the escape character itself."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def slugify(name: str) -> str:
    """
    URL slug from a display name: lowercase, Turkish letters transliterated,
    other non [a-z0-9 -] dropped, whitespace runs to '-', repeated '-' collapsed.
    """
    slug = name.lower().translate(_SLUG_TRANSLITERATION)
    slug = _SLUG_INVALID.sub("", slug).strip()
    slug = _SLUG_WHITESPACE.sub("-", slug)
    return _SLUG_DASHES.sub("-", slug)
