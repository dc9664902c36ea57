"""
Markdown + YAML front-matter rendering for stored links.

A stored link looks like:

    ---
    id: 7f0c...
    title: Hello
    description: ...
    image: https://...
    url: https://...
    ---

    # Hello

    <description>

    [Visit Original Link](<url>)
"""

from typing import Mapping, Tuple

import yaml

FRONT_MATTER_DELIMITER = '---'


def dump_front_matter(data: Mapping) -> str:
    """Serialize a mapping to YAML, keeping key order; always ends with a newline."""
    return yaml.safe_dump(
        dict(data),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float('inf'),
    )


def render_link_markdown(record: Mapping) -> str:
    """Render a persisted link record as a Markdown document with front-matter."""
    front_matter = dump_front_matter(record)
    title = record.get('title', '')
    description = record.get('description', '')
    url = record.get('url', '')

    return (
        f"{FRONT_MATTER_DELIMITER}\n{front_matter}{FRONT_MATTER_DELIMITER}\n\n"
        f"# {title}\n\n"
        f"{description}\n\n"
        f"[Visit Original Link]({url})\n"
    )


def parse_front_matter(text: str) -> Tuple[dict, str]:
    """
    Split a Markdown document into (front_matter, body).

    Raises ValueError if the document does not start with a front-matter block.
    """
    opening = FRONT_MATTER_DELIMITER + '\n'
    if not text or not text.startswith(opening):
        raise ValueError('Document has no front-matter block')

    closing = '\n' + FRONT_MATTER_DELIMITER + '\n'
    end = text.find(closing, len(opening) - 1)
    if end == -1:
        raise ValueError('Front-matter block is not closed')

    yaml_text = text[len(opening):end + 1]
    body = text[end + len(closing):]

    data = yaml.safe_load(yaml_text) or {}
    if not isinstance(data, dict):
        raise ValueError('Front-matter is not a mapping')

    return data, body.lstrip('\n')
