"""
Pytest configuration and fixtures for fluent-http-client tests.
"""

import pytest
import responses as responses_lib

from fluent_http import HttpClientContext
from fluent_http.core.logging.config import LoggingConfig
from fluent_http.core.logging.filters import clear_correlation_id


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "http://localhost:8887"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def ctx(base_url):
    """HttpClientContext instance for testing."""
    context = HttpClientContext(base_url=base_url)
    yield context
    context.close()


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()


@pytest.fixture
def logging_config():
    """
    LoggingConfig fixture for testing.

    Example:
        def test_with_logging(logging_config):
            config = HttpClientConfig.create(logging=logging_config)
            ctx = HttpClientContext(config=config)
    """
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
