"""
Slug and title utilities for stored links.

A stored link's identity is the slug of its title:
1. Lowercased
2. Every run of characters outside [a-z0-9] collapsed to a single hyphen
3. Leading/trailing hyphens stripped
4. Truncated to 100 characters

Two titles with the same slug map to the same file and overwrite each other.
"""

import re
from typing import Tuple

MAX_SLUG_LENGTH = 100
MAX_COMMIT_TITLE_LENGTH = 72
FALLBACK_SLUG = 'untitled'

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]+')


def slugify(title: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """
    Turn a title into a filename-safe slug.

    Examples:
        >>> slugify("Hello, World!! 2024")
        'hello-world-2024'

        >>> slugify("  --Already-Slugged--  ")
        'already-slugged'
    """
    if not title:
        return ''

    slug = _NON_ALPHANUMERIC.sub('-', title.lower()).strip('-')

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip('-')

    return slug


def link_file_path(title: str, links_dir: str = 'links') -> str:
    """Repository path of the Markdown file for a link title."""
    slug = slugify(title) or FALLBACK_SLUG
    if not links_dir:
        return f"{slug}.md"
    return f"{links_dir}/{slug}.md"


def truncate_title(title: str, max_length: int = MAX_COMMIT_TITLE_LENGTH) -> Tuple[str, bool]:
    """
    Truncate title at word boundary, not mid-word.

    Returns:
        Tuple of (truncated_title, was_truncated)

    Examples:
        >>> truncate_title("Hello World", 70)
        ('Hello World', False)

        >>> truncate_title("This is a very long title that exceeds the limit", 20)
        ('This is a very long', True)
    """
    if not title:
        return ('', False)

    title = ' '.join(title.split())

    if len(title) <= max_length:
        return (title, False)

    truncated = title[:max_length]
    last_space = truncated.rfind(' ')

    # Single long word: hard cut with ellipsis
    if last_space == -1:
        return (title[:max_length - 3] + '...', True)

    return (truncated[:last_space].rstrip(), True)
