"""HTTP surface module."""

from .app import create_app
from .auth import Principal, get_current_principal

__all__ = ["Principal", "create_app", "get_current_principal"]
