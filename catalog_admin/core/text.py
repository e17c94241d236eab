import re

from markupsafe import Markup
import markdown as md
import bleach

_HTML_PATTERN = re.compile(r"</?[a-z][\s\S]*?>", re.IGNORECASE)
_SLUG_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_SLUG_SEPARATORS = re.compile(r"[ -]+")

_ALLOWED_TAGS = [
    "a",
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "ul",
    "ol",
    "li",
    "blockquote",
    "h2",
    "h3",
    "h4",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
]

_ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "target", "rel"],
}


def create_slug(value: str) -> str:
    """Turn a display name into a URL-safe slug, e.g. "Spa & Pool!" -> "spa-pool"."""
    value = (value or "").lower()
    value = _SLUG_DISALLOWED.sub("", value)
    value = _SLUG_SEPARATORS.sub("-", value)
    return value.strip("-")


def like_pattern(term: str) -> str:
    """Substring pattern for ``ilike(..., escape="\\\\")`` with ``%`` and ``_`` taken literally."""
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def clean_rich_text(value: str | None) -> str:
    """Strip markup outside the allowed product description subset."""
    raw = (value or "").strip()
    if not raw:
        return ""
    return bleach.clean(raw, tags=_ALLOWED_TAGS, attributes=_ALLOWED_ATTRIBUTES, strip=True)


def render_rich_text(value: str | None) -> Markup:
    raw = (value or "").strip()
    if not raw:
        return Markup("")

    if _HTML_PATTERN.search(raw):
        html = raw
    else:
        html = md.markdown(raw, extensions=["extra", "sane_lists"])

    return Markup(clean_rich_text(html))
