"""
Error taxonomy for the Link Saver Cloud Functions.

Each error carries the HTTP status and the short `error` label that the
handler boundary puts in the JSON envelope:

    {"error": "<label>", "message": "<details>"}

Anything that is not a LinkSaverError is reported as a 500 Internal Server
Error by the handler that caught it.
"""

from typing import Optional


class LinkSaverError(Exception):
    status_code = 500
    label = 'Internal Server Error'

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {'error': self.label, 'message': self.message}


class AuthError(LinkSaverError):
    status_code = 401
    label = 'Unauthorized'


class ValidationError(LinkSaverError):
    status_code = 400
    label = 'Bad Request'


class MethodNotAllowedError(LinkSaverError):
    status_code = 405
    label = 'Method Not Allowed'


class UpstreamFetchError(LinkSaverError):
    """The page could not be fetched (network failure or non-2xx status)."""
    status_code = 400
    label = 'Failed to fetch page'

    def __init__(self, message: str, url: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.upstream_status = upstream_status


class ConfigurationError(LinkSaverError):
    status_code = 500
    label = 'Server configuration error'


class PersistenceError(LinkSaverError):
    """A GitHub contents API call failed."""
    status_code = 500
    label = 'Failed to save to GitHub'

    def __init__(self, message: str, github_status: Optional[int] = None):
        super().__init__(message)
        self.github_status = github_status


class DownstreamError(LinkSaverError):
    """A downstream Cloud Function was unreachable or answered with something other than JSON."""
    status_code = 502
    label = 'Downstream call failed'
