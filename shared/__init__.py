"""Shared utilities for the Link Saver Cloud Functions."""

from .config import (
    Config,
    load_config,
    configure_logging,
)

from .errors import (
    LinkSaverError,
    AuthError,
    ValidationError,
    MethodNotAllowedError,
    UpstreamFetchError,
    ConfigurationError,
    PersistenceError,
    DownstreamError,
)

from .models import (
    METADATA_FIELDS,
    PageMetadata,
    PersistedLinkRecord,
)

from .slug_utils import (
    MAX_SLUG_LENGTH,
    slugify,
    link_file_path,
    truncate_title,
)

from .frontmatter_utils import (
    dump_front_matter,
    render_link_markdown,
    parse_front_matter,
)

from .http_utils import (
    CORS_PREFLIGHT_HEADERS,
    RESPONSE_HEADERS,
    preflight_response,
    json_response,
    error_response,
    require_post,
    parse_json_body,
    check_api_key,
    require_string,
    require_object,
)

__all__ = [
    # Configuration
    'Config',
    'load_config',
    'configure_logging',
    # Errors
    'LinkSaverError',
    'AuthError',
    'ValidationError',
    'MethodNotAllowedError',
    'UpstreamFetchError',
    'ConfigurationError',
    'PersistenceError',
    'DownstreamError',
    # Records
    'METADATA_FIELDS',
    'PageMetadata',
    'PersistedLinkRecord',
    # Slugs
    'MAX_SLUG_LENGTH',
    'slugify',
    'link_file_path',
    'truncate_title',
    # Front-matter
    'dump_front_matter',
    'render_link_markdown',
    'parse_front_matter',
    # HTTP helpers
    'CORS_PREFLIGHT_HEADERS',
    'RESPONSE_HEADERS',
    'preflight_response',
    'json_response',
    'error_response',
    'require_post',
    'parse_json_body',
    'check_api_key',
    'require_string',
    'require_object',
]
