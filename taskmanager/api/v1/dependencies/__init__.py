"""
API v1 dependencies.
"""

from taskmanager.api.v1.dependencies.auth import (
    get_current_identity,
    get_optional_identity,
    security,
)

__all__ = [
    "get_current_identity",
    "get_optional_identity",
    "security",
]
