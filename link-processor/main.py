"""
Link Processor Cloud Function

Single entry point that extracts a link's metadata and saves it to GitHub by
calling the metadata-extractor and github-saver functions in sequence.

Does NOT:
- Retry either step
- Roll back anything when the save fails (the extracted metadata is returned
  so the caller can retry the save itself)
"""

import functions_framework
import logging
import os
import sys
from typing import Optional

import requests

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.config import Config, configure_logging, load_config
from shared.errors import DownstreamError, LinkSaverError
from shared.http_utils import (
    check_api_key,
    error_response,
    json_response,
    parse_json_body,
    preflight_response,
    require_post,
    require_string,
)

# Configuration
CONFIG = load_config()
configure_logging(CONFIG.log_level)

REQUEST_TIMEOUT = 60

logger = logging.getLogger(__name__)


def _response_body(response):
    """Return (body, is_json_object); non-object bodies are wrapped as {'message': ...}."""
    try:
        body = response.json()
    except ValueError:
        return {'message': response.text}, False
    if isinstance(body, dict):
        return body, True
    return {'message': body}, False


def call_function(function_url: str, payload: dict):
    """POST a JSON payload to another Cloud Function. Returns (status_code, body, is_json_object)."""
    try:
        response = requests.post(function_url, json=payload, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        raise DownstreamError(f'Could not reach {function_url}: {str(e)}')

    body, is_json_object = _response_body(response)
    return response.status_code, body, is_json_object


def _downstream_message(body: dict) -> str:
    message = body.get('message') or body.get('error')
    return message if isinstance(message, str) else 'Unknown error'


@functions_framework.http
def process_link(request, config: Optional[Config] = None):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "url": "https://example.com/article",
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
        url = require_string(request_json, 'url')
        config.require_function_urls()

        # Step 1: Extract metadata
        logger.info("Processing link %s", url)
        status, metadata, is_json_object = call_function(
            config.metadata_function_url,
            {'url': url, 'API_KEY': request_json['API_KEY']}
        )
        if not 200 <= status < 300:
            logger.warning("Metadata extraction failed with status %s", status)
            return json_response({
                'error': 'Failed to extract metadata',
                'message': _downstream_message(metadata),
                'details': metadata
            }, status)
        if not is_json_object:
            raise DownstreamError('Metadata function did not return a JSON object')

        # Step 2: Save to GitHub
        status, saved, is_json_object = call_function(
            config.save_function_url,
            {'metadata': metadata, 'API_KEY': request_json['API_KEY']}
        )
        if not 200 <= status < 300:
            logger.warning("Saving to GitHub failed with status %s", status)
            return json_response({
                'error': 'Failed to save to GitHub',
                'message': _downstream_message(saved),
                'details': saved,
                'metadata': metadata
            }, status)
        if not is_json_object:
            logger.warning("Save function returned a non-JSON response")
            return json_response({
                'error': 'Failed to save to GitHub',
                'message': 'Save function did not return a JSON object',
                'details': saved,
                'metadata': metadata
            }, 502)

        return json_response({
            'success': True,
            'message': 'Link processed and saved successfully',
            'metadata': saved.get('metadata', metadata),
            'github': saved.get('github')
        }, 200)

    except LinkSaverError as e:
        logger.warning("Process request failed (%s): %s", e.status_code, e.message)
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error while processing link")
        return error_response(e)
