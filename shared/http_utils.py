"""
Request/response helpers shared by the Cloud Function entry points.

Handlers return the functions_framework (Flask) tuple:
    (body, status_code, headers)
"""

import hmac
import json
import logging
from typing import Any, Mapping, Tuple

from .errors import AuthError, LinkSaverError, MethodNotAllowedError, ValidationError

logger = logging.getLogger(__name__)

CORS_PREFLIGHT_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Max-Age': '3600'
}

RESPONSE_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Content-Type': 'application/json'
}


def preflight_response() -> Tuple[str, int, dict]:
    return ('', 204, dict(CORS_PREFLIGHT_HEADERS))


def json_response(body: Any, status: int = 200) -> Tuple[str, int, dict]:
    return (json.dumps(body), status, dict(RESPONSE_HEADERS))


def error_response(error: Exception) -> Tuple[str, int, dict]:
    """Convert any exception into the {error, message} JSON envelope."""
    if isinstance(error, LinkSaverError):
        return json_response(error.to_dict(), error.status_code)

    return json_response({
        'error': 'Internal Server Error',
        'message': str(error) or error.__class__.__name__
    }, 500)


def require_post(request) -> None:
    if request.method != 'POST':
        raise MethodNotAllowedError(f"Method {request.method} not allowed")


def parse_json_body(request) -> dict:
    """Return the JSON object body, or {} when the body is missing or not an object."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def check_api_key(body: Mapping, expected: str) -> None:
    """Compare the request's API_KEY with the configured secret in constant time."""
    if not expected:
        logger.error("API_KEY is not configured; rejecting request")
        raise AuthError('Invalid or missing API key')

    provided = body.get('API_KEY')
    if not isinstance(provided, str) or not provided:
        raise AuthError('Invalid or missing API key')

    if not hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8')):
        raise AuthError('Invalid or missing API key')


def require_string(body: Mapping, field: str) -> str:
    value = body.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {field}")
    return value.strip()


def require_object(body: Mapping, field: str) -> dict:
    value = body.get(field)
    if not isinstance(value, dict) or not value:
        raise ValidationError(f"Missing required field: {field}")
    return value
