"""
GitHub Saver Cloud Function

Persists link metadata as a Markdown file with YAML front-matter in a GitHub
repository, through the GitHub contents API.

Responsibilities:
- Authenticate the caller (shared API key)
- Assign a stable id to the link record
- Render Markdown and derive the file path from the title slug
- Create the file, or update it when a file with that slug already exists

Does NOT:
- Fetch or parse webpages (metadata-extractor's job)
- Retry conflicting writes (last write wins, a stale sha is reported as an error)
"""

import functions_framework
import base64
import logging
import os
import sys
from typing import Optional
from urllib.parse import quote

import requests

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.config import Config, configure_logging, load_config
from shared.errors import LinkSaverError, PersistenceError
from shared.frontmatter_utils import render_link_markdown
from shared.http_utils import (
    check_api_key,
    error_response,
    json_response,
    parse_json_body,
    preflight_response,
    require_object,
    require_post,
)
from shared.models import PersistedLinkRecord
from shared.slug_utils import link_file_path, truncate_title

# Configuration
CONFIG = load_config()
configure_logging(CONFIG.log_level)

REQUEST_TIMEOUT = 30
GITHUB_API_VERSION = '2022-11-28'

logger = logging.getLogger(__name__)


def github_headers(config: Config) -> dict:
    return {
        'Authorization': f'Bearer {config.github_token}',
        'Accept': 'application/vnd.github+json',
        'X-GitHub-Api-Version': GITHUB_API_VERSION,
    }


def contents_url(config: Config, path: str) -> str:
    """Contents API URL for a file path in the configured repository."""
    return (
        f"{config.github_api_url}/repos/{config.github_owner}/{config.github_repo}"
        f"/contents/{quote(path)}"
    )


def _github_error_message(response) -> str:
    try:
        message = response.json().get('message')
    except ValueError:
        message = None
    return f"GitHub API error {response.status_code}: {message or response.reason or 'unknown error'}"


def get_existing_sha(config: Config, path: str) -> Optional[str]:
    """
    Return the blob sha of the file at `path` on the target branch.

    Only a 404 means the file does not exist (returns None). Any other failure
    raises PersistenceError so a transient error never turns into a create
    without sha.
    """
    try:
        response = requests.get(
            contents_url(config, path),
            headers=github_headers(config),
            params={'ref': config.github_branch},
            timeout=REQUEST_TIMEOUT
        )
    except requests.exceptions.RequestException as e:
        raise PersistenceError(f'Could not check for existing file: {str(e)}')

    if response.status_code == 404:
        return None

    if not response.ok:
        raise PersistenceError(_github_error_message(response), github_status=response.status_code)

    data = response.json()
    if isinstance(data, list):
        raise PersistenceError(f'Path is a directory, not a file: {path}')

    return data.get('sha')


def put_file(config: Config, path: str, content: str, message: str, sha: Optional[str] = None) -> dict:
    """Create or update a file through the contents API. Returns the API response JSON."""
    payload = {
        'message': message,
        'content': base64.b64encode(content.encode('utf-8')).decode('ascii'),
        'branch': config.github_branch,
    }
    if sha:
        payload['sha'] = sha

    try:
        response = requests.put(
            contents_url(config, path),
            headers=github_headers(config),
            json=payload,
            timeout=REQUEST_TIMEOUT
        )
    except requests.exceptions.RequestException as e:
        raise PersistenceError(f'Could not write file: {str(e)}')

    if not response.ok:
        raise PersistenceError(_github_error_message(response), github_status=response.status_code)

    return response.json()


def save_link(config: Config, metadata: dict) -> dict:
    """Persist link metadata and return the response payload for the caller."""
    config.require_github()

    record = PersistedLinkRecord.from_metadata(metadata)
    record_dict = record.to_dict()
    markdown = render_link_markdown(record_dict)
    path = link_file_path(record.title, config.links_dir)

    sha = get_existing_sha(config, path)
    short_title = truncate_title(record.title)[0] or path
    if sha:
        logger.info("Updating existing file %s (id=%s)", path, record.id)
        message = f"Update link: {short_title}"
    else:
        logger.info("Creating file %s (id=%s)", path, record.id)
        message = f"Add link: {short_title}"

    result = put_file(config, path, markdown, message, sha)

    content_info = result.get('content') or {}
    commit_info = result.get('commit') or {}

    return {
        'success': True,
        'metadata': record_dict,
        'github': {
            'url': content_info.get('html_url'),
            'commit': commit_info.get('sha'),
            'path': content_info.get('path', path),
        }
    }


@functions_framework.http
def save_to_github(request, config: Optional[Config] = None):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "metadata": {"title": "...", "description": "...", "image": "...", "url": "...", "id": "<optional>"},
        "API_KEY": "<shared secret>"
    }
    """
    if request.method == 'OPTIONS':
        return preflight_response()

    config = config or CONFIG

    try:
        require_post(request)
        request_json = parse_json_body(request)
        check_api_key(request_json, config.api_key)
        metadata = require_object(request_json, 'metadata')

        response = save_link(config, metadata)
        return json_response(response, 200)

    except LinkSaverError as e:
        logger.warning("Save request failed (%s): %s", e.status_code, e.message)
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error while saving to GitHub")
        return error_response(e)
