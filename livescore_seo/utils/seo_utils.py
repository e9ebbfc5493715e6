"""
SEO normalization helpers shared by the builders and the resolver.
"""

import re
from typing import Any, Iterable, Mapping, Optional

from livescore_seo.domain.constants import (
    DEFAULT_SPORT,
    DESCRIPTION_MAX_LENGTH,
    SPORT_ALIASES,
    TITLE_MAX_LENGTH,
)
from livescore_seo.domain.entities.entities import SeoRobots


ELLIPSIS = "…"

_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_EMPTY_PARENS_RE = re.compile(r"\s*\(\s*\)\s*")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def clamp_text(text: Optional[str], max_length: int) -> Optional[str]:
    """
    Truncate ``text`` to at most ``max_length`` characters.

    Cuts at the last whole word that fits and appends an ellipsis. A single
    word longer than the limit is cut hard.
    """
    if not text:
        return text
    clean = normalize_whitespace(text)
    if len(clean) <= max_length:
        return clean

    sliced = clean[: max_length - 1]
    if clean[max_length - 1] != " ":
        last_space = sliced.rfind(" ")
        if last_space > 0:
            sliced = sliced[:last_space]
    return sliced.rstrip(" ,;:-–") + ELLIPSIS


def clamp_title(text: Optional[str]) -> Optional[str]:
    return clamp_text(text, TITLE_MAX_LENGTH)


def clamp_description(text: Optional[str]) -> Optional[str]:
    return clamp_text(text, DESCRIPTION_MAX_LENGTH)


def fill_template(template: Optional[str], values: Mapping[str, str]) -> str:
    """Replace every ``{key}`` placeholder; unknown placeholders are left as-is."""
    out = template or ""
    for key, value in values.items():
        out = out.replace("{" + key + "}", value or "")
    return out


def tidy_filled_template(text: str) -> str:
    """Drop parentheses left empty by missing values and collapse whitespace."""
    return normalize_whitespace(_EMPTY_PARENS_RE.sub(" ", text))


def normalize_sport(raw: Optional[str]) -> str:
    """Map route sport keys onto canonical ones ("soccer" -> "football")."""
    sport = (raw or DEFAULT_SPORT).strip().lower() or DEFAULT_SPORT
    return SPORT_ALIASES.get(sport, sport)


def ensure_trailing_slash(path: Optional[str]) -> Optional[str]:
    if not path:
        return path
    if path == "/":
        return "/"
    return path if path.endswith("/") else f"{path}/"


def is_absolute_url(value: Optional[str]) -> bool:
    return bool(value) and bool(_ABSOLUTE_URL_RE.match(value))


def full_url(base_url: str, path_or_url: Optional[str]) -> Optional[str]:
    """Join a site base URL and a path; absolute URLs pass through."""
    if not path_or_url:
        return path_or_url
    if is_absolute_url(path_or_url):
        return path_or_url
    base = (base_url or "").rstrip("/")
    clean = path_or_url if path_or_url.startswith("/") else f"/{path_or_url}"
    return f"{base}{clean}"


def normalize_asset_path(value: Any) -> Any:
    """Give relative asset paths a leading slash so they never resolve route-relative."""
    if not isinstance(value, str):
        return value
    clean = value.strip()
    if not clean or is_absolute_url(clean):
        return clean
    return clean if clean.startswith("/") else f"/{clean}"


def parse_robots(value: Any) -> SeoRobots:
    """
    Parse a robots directive.

    Accepts a structured object/mapping (missing flags default to True) or a
    free-text directive such as "noindex, follow". An empty or missing
    directive means index and follow.
    """
    if isinstance(value, SeoRobots):
        return value
    if isinstance(value, Mapping):
        return SeoRobots(
            index=value.get("index") is not False,
            follow=value.get("follow") is not False,
        )
    if hasattr(value, "index") and hasattr(value, "follow") and not isinstance(value, str):
        return SeoRobots(index=value.index is not False, follow=value.follow is not False)
    if isinstance(value, str):
        directive = value.strip().lower()
        if not directive or directive == "all":
            return SeoRobots(index=True, follow=True)
        if directive == "none":
            return SeoRobots(index=False, follow=False)
        return SeoRobots(
            index="index" in directive and "noindex" not in directive,
            follow="follow" in directive and "nofollow" not in directive,
        )
    return SeoRobots(index=True, follow=True)


def apply_title_decorations(title: str, site_name: str, prefix: str = "", suffix: str = "") -> str:
    """
    Add the configured title prefix/suffix.

    The suffix is skipped when the title already ends with it, or when the
    suffix carries the site name and the title already names the site.
    """
    decorated = title or ""

    if prefix and not decorated.startswith(prefix):
        decorated = f"{prefix}{decorated}"

    if not suffix or decorated.endswith(suffix):
        return decorated

    title_lower = decorated.lower()
    site_lower = (site_name or "").lower()
    duplicates_site_name = (
        bool(site_lower)
        and site_lower in suffix.lower()
        and site_lower in title_lower
    )
    if duplicates_site_name:
        return decorated
    return f"{decorated}{suffix}"


def pick_pattern_index(entity_id: Optional[str], pattern_count: int) -> int:
    """Stable pattern rotation: first character code of the id modulo the count."""
    if pattern_count <= 0:
        return 0
    first = ord(entity_id[0]) if entity_id else 0
    return first % pattern_count


def unique_non_empty(values: Iterable[Optional[str]]) -> list:
    seen = set()
    out = []
    for value in values:
        clean = (value or "").strip()
        if not clean or clean in seen:
            continue
        seen.add(clean)
        out.append(clean)
    return out


def prune_none(value: Any) -> Any:
    """Recursively drop None values from dicts (JSON-LD must not carry nulls)."""
    if isinstance(value, dict):
        return {k: prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [prune_none(v) for v in value if v is not None]
    return value
