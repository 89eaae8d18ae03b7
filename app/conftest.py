"""
Root pytest configuration for the client packages.

Provides project-wide hooks and fixtures. Package-specific fixtures are
defined in each package's tests/conftest.py.
"""

import pytest


@pytest.fixture
def anyio_backend():
    """Run coroutine tests on asyncio only."""
    return "asyncio"


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full upload journeys against mock servers)
    - test_selector.py, test_direct.py, test_proxied.py, etc. → integration
    - test_validators.py, test_types.py, test_progress.py, etc. → unit
    - Unmatched files → unit

    Explicit markers on test functions/classes take precedence.
    """
    # Filename patterns for each category
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_selector.py",
        "test_direct.py",
        "test_proxied.py",
        "test_signing.py",
        "test_filesystem.py",
    ]

    unit_patterns = [
        "test_validators.py",
        "test_types.py",
        "test_progress.py",
        "test_multipart.py",
        "test_errors.py",
        "test_platforms.py",
        "test_exceptions.py",
        "test_config.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filepath = str(item.fspath)
        filename = filepath.split("/")[-1]

        # Check patterns in priority order
        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.unit)
