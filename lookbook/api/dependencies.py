"""FastAPI dependency injection for the suggestion provider.

Example:
    from fastapi import Depends
    from lookbook.api.dependencies import get_suggestion_provider
    from lookbook.core.providers import SuggestionProvider

    @router.post("/suggest")
    async def suggest(provider: SuggestionProvider = Depends(get_suggestion_provider)):
        ...
"""

from fastapi import HTTPException

from lookbook.core.logging import get_logger
from lookbook.core.providers import SuggestionProvider
from lookbook.providers.groq_provider import GroqSuggestionProvider

logger = get_logger(__name__)


class AppState:
    """Shared resources for request handlers.

    The suggestion provider is optional: without a GROQ_API_KEY the API still
    starts, serves health checks, and answers /suggest with a 500.
    """

    def __init__(self) -> None:
        self._suggestion_provider: SuggestionProvider | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def suggestion_provider(self) -> SuggestionProvider | None:
        """The configured provider, or None when no API key was set.

        Raises:
            RuntimeError: If accessed before initialize().
        """
        if not self._initialized:
            raise RuntimeError("App state not initialized")
        return self._suggestion_provider

    async def initialize(
        self,
        groq_api_key: str | None = None,
        groq_model: str | None = None,
        suggestion_provider: SuggestionProvider | None = None,
    ) -> None:
        """Create providers from configuration.

        Args:
            groq_api_key: Groq API key; without one no provider is created.
            groq_model: Optional model override.
            suggestion_provider: Pre-built provider, used as-is (tests).
        """
        if self._initialized:
            return

        if suggestion_provider is not None:
            self._suggestion_provider = suggestion_provider
        elif groq_api_key:
            self._suggestion_provider = GroqSuggestionProvider(
                api_key=groq_api_key, model=groq_model
            )
            logger.info("suggestion_provider_initialized", provider="groq")
        else:
            logger.warning("suggestion_provider_not_configured")

        self._initialized = True

    async def shutdown(self) -> None:
        self._suggestion_provider = None
        self._initialized = False


_app_state = AppState()


def get_app_state() -> AppState:
    return _app_state


def get_suggestion_provider() -> SuggestionProvider:
    """Dependency returning the suggestion provider.

    Raises:
        HTTPException: 500 when no provider is configured.
    """
    provider = get_app_state().suggestion_provider
    if provider is None:
        raise HTTPException(status_code=500, detail="GROQ_API_KEY not configured")
    return provider
