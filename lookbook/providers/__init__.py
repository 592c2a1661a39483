"""Suggestion provider implementations.

Concrete implementations of the SuggestionProvider protocol defined in
lookbook/core/providers.py.
"""

from lookbook.providers.groq_provider import GroqAPIError, GroqSuggestionProvider

__all__ = [
    "GroqAPIError",
    "GroqSuggestionProvider",
]
