"""
Root pytest configuration for the upload client.

Settings read ``.env.test`` (optional) instead of the developer's
``.env.development`` so local overrides never leak into test runs.
Package-specific fixtures are defined in each package's tests/conftest.py.
"""

import os
from pathlib import Path

os.environ.setdefault("ENV_FILE", str(Path(__file__).resolve().parent / ".env.test"))
