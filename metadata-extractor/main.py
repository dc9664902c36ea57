"""
Metadata Extractor Cloud Function

Fetches a webpage and extracts the basic link metadata saved by Link Saver.

Responsibilities:
- Authenticate the caller (shared API key)
- Fetch webpage content (single attempt, no retries)
- Extract title, description and og:image

Does NOT:
- Write anything to GitHub (github-saver's job)
- Retry failed fetches (the caller decides)
"""

import functions_framework
import logging
import os
import sys
from typing import Optional

import requests
from bs4 import BeautifulSoup

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.config import Config, configure_logging, load_config
from shared.errors import LinkSaverError, UpstreamFetchError
from shared.http_utils import (
    check_api_key,
    error_response,
    json_response,
    parse_json_body,
    preflight_response,
    require_post,
    require_string,
)
from shared.models import PageMetadata

# Configuration
CONFIG = load_config()
configure_logging(CONFIG.log_level)

USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
REQUEST_TIMEOUT = 30

logger = logging.getLogger(__name__)


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find('meta', attrs=attrs)
    if not tag:
        return ''
    content = tag.get('content')
    return content.strip() if isinstance(content, str) else ''


def extract_metadata(html, url: str = '') -> PageMetadata:
    """
    Extract link metadata from page HTML (str, raw bytes, or an already parsed soup).

    Missing tags yield empty strings; never raises for incomplete documents.
    """
    if not html:
        return PageMetadata(url=url or '')

    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, 'html.parser')

    title_tag = soup.find('title')
    title = title_tag.get_text(strip=True) if title_tag else ''

    return PageMetadata(
        title=title,
        description=_meta_content(soup, name='description'),
        image=_meta_content(soup, property='og:image'),
        url=url or '',
    )


def fetch_webpage(url: str, timeout: int = REQUEST_TIMEOUT) -> bytes:
    """
    Fetch raw webpage bytes. Raises UpstreamFetchError on any failure.

    Bytes are returned undecoded so BeautifulSoup can honour the page's own
    <meta charset>; requests falls back to ISO-8859-1 for text/html without one.
    """
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.5',
    }

    try:
        response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except requests.exceptions.Timeout:
        raise UpstreamFetchError('Request timed out', url=url)
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise UpstreamFetchError(f'HTTP error: {status}', url=url, upstream_status=status)
    except requests.exceptions.RequestException as e:
        raise UpstreamFetchError(f'Request failed: {str(e)}', url=url)

    logger.debug("Fetched url=%s status_code=%s", url, response.status_code)
    return response.content


@functions_framework.http
def get_metadata(request, config: Optional[Config] = None):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "url": "https://example.com/article",
        "API_KEY": "<shared secret>"
    }

    Returns {"title", "description", "image", "url"} on success.
    """
    if request.method == 'OPTIONS':
        return preflight_response()

    config = config or CONFIG

    try:
        require_post(request)
        request_json = parse_json_body(request)
        check_api_key(request_json, config.api_key)
        url = require_string(request_json, 'url')

        logger.info("Extracting metadata for %s", url)
        html = fetch_webpage(url)
        metadata = extract_metadata(html, url)

        return json_response(metadata.to_dict(), 200)

    except LinkSaverError as e:
        logger.warning("Metadata request failed (%s): %s", e.status_code, e.message)
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error while extracting metadata")
        return error_response(e)
