"""Flat link records passed between the Cloud Functions."""

import uuid
from dataclasses import asdict, dataclass
from typing import Any, Mapping

METADATA_FIELDS = ('title', 'description', 'image', 'url')


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class PageMetadata:
    title: str = ''
    description: str = ''
    image: str = ''
    url: str = ''

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PageMetadata':
        return cls(**{field: _as_text(data.get(field)) for field in METADATA_FIELDS})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PersistedLinkRecord:
    """PageMetadata plus the id that identifies the stored file across updates."""
    id: str
    title: str = ''
    description: str = ''
    image: str = ''
    url: str = ''

    @classmethod
    def from_metadata(cls, data: Mapping[str, Any]) -> 'PersistedLinkRecord':
        """Keep an existing id, otherwise assign a fresh UUID4."""
        metadata = PageMetadata.from_dict(data)
        record_id = _as_text(data.get('id')) or str(uuid.uuid4())
        return cls(id=record_id, **metadata.to_dict())

    def to_dict(self) -> dict:
        # Field order is the front-matter key order: id, title, description, image, url
        return asdict(self)
