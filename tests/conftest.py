"""Shared pytest fixtures for lookbook tests."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio

from lookbook.adapters.memory_repository import MemoryRepository
from lookbook.core.animation import FrameAnimator
from lookbook.core.carousel_logic import RackController
from lookbook.core.config import RackConfig
from tests.mocks.providers import MockSuggestionProvider, RecordingRenderer
from tests.mocks.rack import Recorder


@pytest.fixture
def rack_config() -> RackConfig:
    """Default config: 260px cards with a 28px gap, stride 288."""
    return RackConfig()


@pytest.fixture
def animator() -> FrameAnimator:
    return FrameAnimator()


@pytest.fixture
def rack_items() -> list[str]:
    return ["coat", "boots", "scarf", "jeans", "hat"]


@pytest.fixture
def make_controller(
    animator: FrameAnimator, rack_config: RackConfig
) -> Callable[..., tuple[RackController[str], Recorder, Recorder]]:
    """Factory for a controller plus recorders for its two callbacks.

    Example:
        controller, changes, activations = make_controller(["a", "b"])
    """

    def factory(
        items: list[str] | None = None, **kwargs: Any
    ) -> tuple[RackController[str], Recorder, Recorder]:
        changes = Recorder()
        activations = Recorder()
        controller: RackController[str] = RackController(
            animator,
            config=kwargs.pop("config", rack_config),
            items=items if items is not None else ["coat", "boots", "scarf", "jeans", "hat"],
            on_active_change=changes,
            on_activate=activations,
            **kwargs,
        )
        return controller, changes, activations

    return factory


@pytest.fixture
def mock_suggestion_provider() -> MockSuggestionProvider:
    return MockSuggestionProvider()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest_asyncio.fixture
async def memory_repo() -> AsyncGenerator[MemoryRepository, None]:
    """A connected in-memory item repository."""
    async with MemoryRepository() as repo:
        yield repo
