"""HTTP API package for the web client."""

from lookbook.api.app import create_app
from lookbook.api.dependencies import get_app_state, get_suggestion_provider

__all__ = [
    "create_app",
    "get_app_state",
    "get_suggestion_provider",
]
