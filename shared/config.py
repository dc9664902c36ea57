"""
Runtime configuration for the Link Saver Cloud Functions.

Configuration is read from the environment once, when a function module is
imported, and passed to handlers as an immutable Config. Tests build their
own Config instead of patching os.environ.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_GITHUB_BRANCH = 'main'
DEFAULT_LINKS_DIR = 'links'
DEFAULT_GITHUB_API_URL = 'https://api.github.com'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


@dataclass(frozen=True)
class Config:
    api_key: Optional[str] = None
    github_token: Optional[str] = None
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None
    github_branch: str = DEFAULT_GITHUB_BRANCH
    links_dir: str = DEFAULT_LINKS_DIR
    github_api_url: str = DEFAULT_GITHUB_API_URL
    metadata_function_url: Optional[str] = None
    save_function_url: Optional[str] = None
    log_level: str = 'INFO'

    def require_github(self) -> None:
        """Raise ConfigurationError if any GitHub setting is missing."""
        missing = [
            name for name, value in (
                ('GITHUB_TOKEN', self.github_token),
                ('GITHUB_OWNER', self.github_owner),
                ('GITHUB_REPO', self.github_repo),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing GitHub configuration: {', '.join(missing)}")

    def require_function_urls(self) -> None:
        """Raise ConfigurationError if the downstream function URLs are missing."""
        missing = [
            name for name, value in (
                ('METADATA_FUNCTION_URL', self.metadata_function_url),
                ('SAVE_FUNCTION_URL', self.save_function_url),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing function configuration: {', '.join(missing)}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build a Config from environment variables (defaults to os.environ)."""
    env = os.environ if environ is None else environ

    return Config(
        api_key=env.get('API_KEY') or None,
        github_token=env.get('GITHUB_TOKEN') or None,
        github_owner=env.get('GITHUB_OWNER') or None,
        github_repo=env.get('GITHUB_REPO') or None,
        github_branch=env.get('GITHUB_BRANCH') or DEFAULT_GITHUB_BRANCH,
        links_dir=(env.get('GITHUB_LINKS_DIR') or DEFAULT_LINKS_DIR).strip('/'),
        github_api_url=(env.get('GITHUB_API_URL') or DEFAULT_GITHUB_API_URL).rstrip('/'),
        metadata_function_url=env.get('METADATA_FUNCTION_URL') or None,
        save_function_url=env.get('SAVE_FUNCTION_URL') or None,
        log_level=(env.get('LOG_LEVEL') or 'INFO').upper(),
    )


def configure_logging(level: str = 'INFO') -> None:
    """Attach a stream handler to the root logger unless one is already configured."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    if any(not isinstance(handler, logging.NullHandler) for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
