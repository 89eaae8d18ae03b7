"""
Core Package - Client-wide Base Classes

This package contains the generic foundation shared by every feature
package. It holds no upload-specific logic.

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Local checks that fail before any network activity
    - ExternalServiceError: Application server and storage provider failures

Usage:
    from core.exceptions import BaseApplicationError

    try:
        await selector.upload(request)
    except BaseApplicationError as e:
        show_alert(e.message)

Note:
    - Feature logic should NOT go here. Extend core classes in feature packages.
"""

from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    ValidationError,
)

__all__ = [
    "BaseApplicationError",
    "ValidationError",
    "ExternalServiceError",
]
