
import re
import logging
from typing import Callable, Optional

from unidecode import unidecode

from app.core.config import settings

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


class SlugSpaceExhausted(ValueError):
    """Raised when no free suffix was found within the attempt cap."""

    def __init__(self, base_slug: str, attempts: int):
        self.base_slug = base_slug
        self.attempts = attempts
        super().__init__(f"No free slug for '{base_slug}' after {attempts} attempts")


def _truncate(slug: str, max_length: int) -> str:
    return slug[:max_length].rstrip("-")


def normalize(
    title: Optional[str],
    fallback: Optional[str] = None,
    max_length: Optional[int] = None,
) -> str:
    """Convert text to a URL-safe slug: ASCII, lowercase, hyphens, never empty, at most max_length chars."""
    if max_length is None:
        max_length = settings.SLUG_MAX_LENGTH

    slug = unidecode(title or "").lower()
    slug = _truncate(re.sub(r"[^a-z0-9]+", "-", slug).strip("-"), max_length)
    if slug:
        return slug
    return fallback or settings.SLUG_FALLBACK


def assign_unique_slug(
    base_slug: str,
    exists: Callable[[str], bool],
    max_attempts: Optional[int] = None,
    max_length: Optional[int] = None,
) -> str:
    """
    Return the first candidate that `exists` reports as free.

    Candidates are tried in order: base, base-1, base-2, ...
    The base is shortened as needed so every candidate fits in max_length.
    `exists` must not count the record being saved as a collision.
    """
    if max_attempts is None:
        max_attempts = settings.SLUG_MAX_ATTEMPTS
    if max_length is None:
        max_length = settings.SLUG_MAX_LENGTH

    slug = _truncate(base_slug, max_length)
    i = 1
    while exists(slug):
        logger.debug("Slug '%s' is taken.", slug)
        if i > max_attempts:
            raise SlugSpaceExhausted(base_slug, max_attempts)
        suffix = f"-{i}"
        slug = _truncate(base_slug, max_length - len(suffix)) + suffix
        i += 1
    return slug


def is_placeholder_slug(slug: Optional[str]) -> bool:
    return bool(slug) and slug.startswith(settings.SLUG_PLACEHOLDER_PREFIX)


def needs_slug(current_slug: Optional[str]) -> bool:
    """Empty and placeholder slugs track the title; anything else was set on purpose."""
    return not current_slug or is_placeholder_slug(current_slug)


def compute_slug(
    current_slug: Optional[str],
    title: Optional[str],
    exists: Callable[[str], bool],
) -> str:
    if not needs_slug(current_slug):
        return current_slug
    return assign_unique_slug(normalize(title), exists)
