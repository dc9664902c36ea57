"""
Shared pytest fixtures for Link Saver tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path
from bs4 import BeautifulSoup

from shared.config import Config

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent

TEST_API_KEY = 'test-api-key'
METADATA_FUNCTION_URL = 'https://functions.example.com/get_metadata'
SAVE_FUNCTION_URL = 'https://functions.example.com/save_to_github'
GITHUB_CONTENTS_URL = 'https://api.github.com/repos/octo/links-repo/contents'


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function modules with unique names at module load time
_metadata_extractor_module = _load_module_from_path(
    'metadata_extractor_main',
    PROJECT_ROOT / 'metadata-extractor' / 'main.py'
)

_github_saver_module = _load_module_from_path(
    'github_saver_main',
    PROJECT_ROOT / 'github-saver' / 'main.py'
)

_link_processor_module = _load_module_from_path(
    'link_processor_main',
    PROJECT_ROOT / 'link-processor' / 'main.py'
)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def api_key():
    return TEST_API_KEY


@pytest.fixture
def test_config():
    """Fully populated configuration for all three functions."""
    return Config(
        api_key=TEST_API_KEY,
        github_token='ghp_test_token',
        github_owner='octo',
        github_repo='links-repo',
        github_branch='main',
        metadata_function_url=METADATA_FUNCTION_URL,
        save_function_url=SAVE_FUNCTION_URL,
    )


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


# ============================================================================
# Metadata Extractor Fixtures
# ============================================================================

@pytest.fixture
def metadata_extractor_module():
    """Returns the loaded metadata-extractor module (for monkeypatching)."""
    return _metadata_extractor_module


@pytest.fixture
def extract_metadata():
    """Returns extract_metadata function from metadata-extractor."""
    return _metadata_extractor_module.extract_metadata


@pytest.fixture
def fetch_webpage():
    """Returns fetch_webpage function from metadata-extractor."""
    return _metadata_extractor_module.fetch_webpage


@pytest.fixture
def get_metadata():
    """Returns main entry point from metadata-extractor."""
    return _metadata_extractor_module.get_metadata


@pytest.fixture
def sample_article_html():
    """Returns HTML of a sample article page."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>10 Python Tips | Example Blog</title>
        <meta property="og:title" content="10 Python Tips You Should Know">
        <meta property="og:image" content="https://example.com/image.jpg">
        <meta name="description" content="Learn essential Python tips">
    </head>
    <body>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <p>Here are some tips for Python development.</p>
        </article>
    </body>
    </html>
    """


@pytest.fixture
def sample_article_soup(sample_article_html):
    """Returns BeautifulSoup of a sample article page."""
    return BeautifulSoup(sample_article_html, 'html.parser')


@pytest.fixture
def empty_soup():
    """Returns empty BeautifulSoup."""
    return BeautifulSoup("", 'html.parser')


# ============================================================================
# GitHub Saver Fixtures
# ============================================================================

@pytest.fixture
def save_to_github():
    """Returns main entry point from github-saver."""
    return _github_saver_module.save_to_github


@pytest.fixture
def get_existing_sha():
    """Returns get_existing_sha function from github-saver."""
    return _github_saver_module.get_existing_sha


@pytest.fixture
def sample_metadata():
    return {
        'title': 'Hello, World!! 2024',
        'description': 'A greeting for the new year',
        'image': 'https://example.com/hello.png',
        'url': 'https://example.com/hello'
    }


@pytest.fixture
def github_file_url():
    """Contents API URL of the file written for sample_metadata."""
    return f"{GITHUB_CONTENTS_URL}/links/hello-world-2024.md"


@pytest.fixture
def github_put_response():
    """Sample GitHub contents API response for a successful write."""
    return {
        'content': {
            'name': 'hello-world-2024.md',
            'path': 'links/hello-world-2024.md',
            'sha': 'newblobsha',
            'html_url': 'https://github.com/octo/links-repo/blob/main/links/hello-world-2024.md'
        },
        'commit': {
            'sha': 'commitsha123',
            'message': 'Add link: Hello, World!! 2024'
        }
    }


# ============================================================================
# Link Processor Fixtures
# ============================================================================

@pytest.fixture
def process_link():
    """Returns main entry point from link-processor."""
    return _link_processor_module.process_link


@pytest.fixture
def function_urls():
    return {'metadata': METADATA_FUNCTION_URL, 'save': SAVE_FUNCTION_URL}
