"""Rack session: the rack controller wired to its collaborators.

A RackSession owns one RackController and connects it to
- an item source (async callable returning the vendor's in-stock items),
- a CardRenderer that draws each card from its StyleParams,
- an optional active-item observer (pagination dots, captions),
- an activation handler (open the item detail),
- the pointer, wheel and keyboard adapters on an EventTarget.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, Protocol, TypeVar

from lookbook.core.animation import Animator, FrameAnimator
from lookbook.core.carousel_logic import ActivateHandler, ActiveObserver, RackController
from lookbook.core.config import RackConfig, RackLayout
from lookbook.core.input_adapters import (
    EventTarget,
    KeyboardAdapter,
    PointerAdapter,
    WheelAdapter,
)
from lookbook.core.logging import get_logger
from lookbook.core.rack_physics import StyleParams

logger = get_logger(__name__)

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

ItemSource = Callable[[], Awaitable[Sequence[T]]]


class CardRenderer(Protocol[T_contra]):
    """Draws cards; lookbook only tells it what and how."""

    def render_card(self, index: int, item: T_contra, style: StyleParams) -> None: ...

    def render_empty(self) -> None: ...


class RackSession(Generic[T]):
    """Wires a RackController to items, rendering, observers and input.

    Args:
        fetch_items: Async callable returning the current items.
        renderer: Receives one render_card call per card per frame.
        config: Rack geometry and physics.
        animator: Settle animator; a FrameAnimator is created if omitted.
        on_active_change: Observer for (index, item) of the centered card.
        on_activate: Called with (index, item) when the centered card is tapped.
    """

    def __init__(
        self,
        fetch_items: ItemSource[T],
        renderer: CardRenderer[T],
        config: RackConfig | None = None,
        animator: Animator | None = None,
        on_active_change: ActiveObserver[T] | None = None,
        on_activate: ActivateHandler[T] | None = None,
    ) -> None:
        self._fetch_items = fetch_items
        self._renderer = renderer
        self._config = config or RackConfig()
        self.animator = animator if animator is not None else FrameAnimator()
        self.controller: RackController[T] = RackController(
            self.animator,
            config=self._config,
            on_active_change=on_active_change,
            on_activate=on_activate,
        )
        self._layout = RackLayout(
            card_width=self._config.card_width,
            card_height=self._config.card_width * self._config.aspect_ratio,
            stride=self._config.stride,
        )
        self._adapters: list[PointerAdapter | WheelAdapter | KeyboardAdapter] = []

    @property
    def layout(self) -> RackLayout:
        return self._layout

    async def refresh(self) -> int:
        """Fetch items and replace the track wholesale.

        Returns:
            The number of items fetched.
        """
        items = await self._fetch_items()
        self.controller.set_items(items)
        logger.info("rack_refreshed", count=len(items))
        return len(items)

    def resize(self, viewport_width: float, viewport_height: float) -> RackLayout:
        """Refit cards to the viewport, keeping the active card centered.

        Raises:
            RackConfigurationError: If the viewport yields a non-positive stride.
        """
        self._layout = self._config.layout_for(viewport_width, viewport_height)
        self.controller.set_stride(self._layout.stride)
        logger.debug(
            "rack_resized",
            width=viewport_width,
            height=viewport_height,
            stride=self._layout.stride,
        )
        return self._layout

    def render_frame(self) -> None:
        """Draw every card at the current offset, or the empty state."""
        items = self.controller.items
        if not items:
            self._renderer.render_empty()
            return
        for index, item in enumerate(items):
            style = self.controller.style_for(index)
            if style is not None:
                self._renderer.render_card(index, item, style)

    def tap(self, index: int) -> bool:
        """Forward a card tap from the renderer."""
        return self.controller.card_tap(index)

    def pagination(self) -> list[bool]:
        """One flag per item; True marks the active card."""
        active = self.controller.active_index
        return [index == active for index in range(self.controller.count)]

    def attach(self, target: EventTarget) -> None:
        """Start listening for input on ``target``; replaces any earlier attach."""
        self.detach()
        self._adapters = [
            PointerAdapter(self.controller, target, self._config.velocity_window),
            WheelAdapter(self.controller, target),
            KeyboardAdapter(self.controller, target),
        ]
        for adapter in self._adapters:
            adapter.attach()

    def detach(self) -> None:
        """Remove every listener registered by attach()."""
        for adapter in self._adapters:
            adapter.detach()
        self._adapters = []
