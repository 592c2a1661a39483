"""Rack carousel controller - platform agnostic.

RackController owns the rack's scroll offset and gesture state. Input
adapters feed it pointer, wheel and keyboard events; an Animator moves the
offset while it settles; renderers read style_for() for every card on every
frame. Nothing else writes the offset.

    IDLE --gesture_start--> DRAGGING --gesture_end / gesture_cancel--> SETTLING
    SETTLING --animation done--> IDLE

Wheel, keyboard and tap snaps are accepted from IDLE and SETTLING, never
while DRAGGING. A gesture_start during SETTLING stops the running animation
and picks the offset up where the animation left it.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from lookbook.core import rack_physics
from lookbook.core.animation import AnimationProfile, Animator, SpringProfile, TweenProfile
from lookbook.core.config import RackConfig, validate_stride
from lookbook.core.logging import get_logger
from lookbook.core.rack_physics import StyleParams

logger = get_logger(__name__)

T = TypeVar("T")

ActiveObserver = Callable[[int, T], None]
ActivateHandler = Callable[[int, T], None]

ARROW_STEPS = {"ArrowLeft": -1, "ArrowRight": 1}


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SETTLING = "settling"


@dataclass
class DragGesture:
    """Bookkeeping for the drag in progress.

    Attributes:
        start_x: Pointer position when the gesture began.
        start_offset: Rack offset when the gesture began.
        last_x: Most recent pointer position.
    """

    start_x: float
    start_offset: float
    last_x: float

    @property
    def displacement(self) -> float:
        return abs(self.last_x - self.start_x)


class RackController(Generic[T]):
    """Controls the rack offset, gestures and active card.

    Args:
        animator: Runs settle animations.
        config: Geometry and physics constants.
        items: Initial track.
        stride: Initial stride; defaults to ``config.stride``.
        on_active_change: Called with (index, item) whenever the active card changes.
        on_activate: Called with (index, item) when the centered card is tapped.

    Raises:
        RackConfigurationError: If the stride is not positive.
    """

    def __init__(
        self,
        animator: Animator,
        config: RackConfig | None = None,
        items: Sequence[T] = (),
        stride: float | None = None,
        on_active_change: ActiveObserver[T] | None = None,
        on_activate: ActivateHandler[T] | None = None,
    ) -> None:
        self._animator = animator
        self._config = config or RackConfig()
        self._stride = validate_stride(self._config.stride if stride is None else stride)
        self._items: tuple[T, ...] = tuple(items)
        self._pending_items: tuple[T, ...] | None = None
        self._on_active_change = on_active_change
        self._on_activate = on_activate

        self._offset = 0.0
        self._state = GestureState.IDLE
        self._gesture: DragGesture | None = None
        self._last_displacement = 0.0
        self._wheel_accumulator = 0.0
        self._settle_target: float | None = None
        self._notified_index = self.active_index

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def offset(self) -> float:
        return self._offset

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def stride(self) -> float:
        return self._stride

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def active_index(self) -> int | None:
        """Index of the centered card, or None for an empty rack."""
        return rack_physics.active_index(self._offset, self._stride, self.count)

    @property
    def active_item(self) -> T | None:
        index = self.active_index
        return None if index is None else self._items[index]

    @property
    def settle_target(self) -> float | None:
        """Offset the running settle is heading to, or None when not settling."""
        return self._settle_target

    @property
    def wheel_accumulator(self) -> float:
        return self._wheel_accumulator

    def style_for(self, index: int) -> StyleParams | None:
        """Visual parameters for card ``index`` at the current offset.

        Returns None when the rack is empty.
        """
        if not self._items:
            return None
        return rack_physics.style_for(self._offset, index, self._stride)

    # ------------------------------------------------------------------
    # Track and geometry
    # ------------------------------------------------------------------

    def set_items(self, items: Sequence[T]) -> None:
        """Replace the whole track.

        A replacement that arrives mid-drag is held back until release, so
        the track never changes under the pointer.
        """
        if self._state is GestureState.DRAGGING:
            self._pending_items = tuple(items)
            logger.debug("track_replacement_deferred", count=len(self._pending_items))
            return
        self._apply_items(tuple(items))

    def _apply_items(self, items: tuple[T, ...]) -> None:
        self._items = items
        self._pending_items = None
        if not items:
            self._animator.cancel()
            self._settle_target = None
            self._state = GestureState.IDLE
            self._offset = 0.0
            self._notified_index = None
        elif self._offset < rack_physics.min_offset(self._stride, self.count):
            # The rack shrank past the current position; land on the last card.
            self._animator.cancel()
            self._settle_target = None
            self._state = GestureState.IDLE
            self._set_offset(rack_physics.min_offset(self._stride, self.count))
        else:
            self._publish_active()
        logger.debug("track_replaced", count=len(items))

    def set_stride(self, stride: float) -> None:
        """Change the stride after a viewport resize, keeping the active card.

        Raises:
            RackConfigurationError: If the stride is not positive.
        """
        stride = validate_stride(stride)
        if self._state is GestureState.DRAGGING:
            logger.warning("resize_during_drag", stride=stride)
            self._stride = stride
            return
        index = self.active_index or 0
        self._animator.cancel()
        self._settle_target = None
        self._state = GestureState.IDLE
        self._stride = stride
        self._set_offset(rack_physics.offset_for_index(index, stride))

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------

    def gesture_start(self, pointer_x: float) -> bool:
        """Begin a drag at ``pointer_x``.

        Returns:
            False if a drag is already in progress.
        """
        if self._state is GestureState.DRAGGING:
            logger.warning("gesture_start_ignored", state=self._state.value)
            return False
        if self._state is GestureState.SETTLING:
            self._animator.cancel()
            self._settle_target = None
            logger.debug("settle_interrupted", offset=self._offset)

        self._gesture = DragGesture(
            start_x=pointer_x, start_offset=self._offset, last_x=pointer_x
        )
        self._last_displacement = 0.0
        self._state = GestureState.DRAGGING
        return True

    def gesture_move(self, pointer_x: float) -> None:
        """Track the pointer 1:1; the offset is not clamped mid-drag."""
        if self._state is not GestureState.DRAGGING or self._gesture is None:
            logger.debug("gesture_move_ignored", state=self._state.value)
            return
        self._gesture.last_x = pointer_x
        self._set_offset(self._gesture.start_offset + (pointer_x - self._gesture.start_x))

    def gesture_end(self, pointer_x: float, velocity: float, is_coarse_pointer: bool) -> None:
        """Release the drag and settle.

        Touch releases coast to a clamped stop without snapping. Mouse releases
        spring to a card chosen from position plus a velocity bias.

        Args:
            pointer_x: Pointer position at release.
            velocity: Release velocity in px/s (positive moves the rack right).
            is_coarse_pointer: True for touch input.
        """
        if self._state is not GestureState.DRAGGING or self._gesture is None:
            logger.warning("gesture_end_ignored", state=self._state.value)
            return
        self.gesture_move(pointer_x)
        self._finish_gesture()

        config = self._config
        if is_coarse_pointer:
            target = rack_physics.coast_target(
                self._offset, velocity, self._stride, self.count, config
            )
            profile: AnimationProfile = TweenProfile(
                duration=rack_physics.coast_duration(velocity, config)
            )
        else:
            index = rack_physics.snap_index(
                self._offset, velocity, self._stride, self.count, config
            )
            target = rack_physics.offset_for_index(index, self._stride)
            profile = self._spring(velocity * config.spring_velocity_scale)

        logger.debug(
            "gesture_released",
            velocity=velocity,
            coarse=is_coarse_pointer,
            offset=self._offset,
            target=target,
        )
        self._settle(target, profile)

    def gesture_cancel(self) -> None:
        """Abort the drag; behaves like a release with zero velocity."""
        if self._state is not GestureState.DRAGGING:
            return
        self._finish_gesture()
        index = rack_physics.active_index(self._offset, self._stride, self.count) or 0
        logger.debug("gesture_cancelled", offset=self._offset, index=index)
        self._settle(rack_physics.offset_for_index(index, self._stride), self._spring())

    def _finish_gesture(self) -> None:
        if self._gesture is not None:
            self._last_displacement = self._gesture.displacement
        self._gesture = None
        if self._pending_items is not None:
            self._apply_items(self._pending_items)

    # ------------------------------------------------------------------
    # Discrete navigation
    # ------------------------------------------------------------------

    def snap_to_index(self, index: int) -> bool:
        """Spring to card ``index`` (clamped to the track).

        Returns:
            False when refused: mid-drag or with an empty rack.
        """
        if self._state is GestureState.DRAGGING:
            logger.debug("snap_ignored_while_dragging", index=index)
            return False
        if not self._items:
            return False
        index = rack_physics.clamp_index(index, self.count)
        self._settle(rack_physics.offset_for_index(index, self._stride), self._spring())
        return True

    def _step_origin(self) -> int | None:
        """Card a wheel or arrow step counts from.

        While settling this is the card being settled on, so quick repeated
        steps add up instead of landing on the same neighbour.
        """
        if self._state is GestureState.SETTLING and self._settle_target is not None:
            return rack_physics.active_index(self._settle_target, self._stride, self.count)
        return self.active_index

    def wheel(self, delta_x: float, delta_y: float) -> bool:
        """Accumulate wheel travel; step one card each time it crosses the threshold.

        The dominant axis wins, keeping its sign.

        Returns:
            True if this call triggered a snap.
        """
        if self._state is GestureState.DRAGGING:
            return False
        delta = delta_x if abs(delta_x) > abs(delta_y) else delta_y
        self._wheel_accumulator += delta
        if abs(self._wheel_accumulator) < self._config.wheel_threshold:
            return False

        step = 1 if self._wheel_accumulator > 0 else -1
        self._wheel_accumulator = 0.0
        current = self._step_origin()
        if current is None:
            return False
        logger.debug("wheel_snap", step=step, from_index=current)
        return self.snap_to_index(current + step)

    def key(self, key: str) -> bool:
        """Handle a key press; arrows step one card without wrapping.

        Returns:
            True if the key was consumed.
        """
        step = ARROW_STEPS.get(key)
        if step is None or self._state is GestureState.DRAGGING:
            return False
        current = self._step_origin()
        if current is None:
            return False
        self.snap_to_index(current + step)
        return True

    def card_tap(self, index: int) -> bool:
        """Handle a tap on card ``index``.

        Taps only count when the preceding gesture travelled no more than the
        tap slop. Tapping the centered card activates it; tapping any other
        card brings it to the center instead.

        Returns:
            True if the tap activated the card or started a snap.
        """
        if self._state is GestureState.DRAGGING:
            return False
        if self._last_displacement > self._config.tap_slop:
            logger.debug("tap_rejected_as_drag", displacement=self._last_displacement)
            return False
        if not 0 <= index < self.count:
            return False

        if index == self.active_index:
            logger.info("card_activated", index=index)
            if self._on_activate is not None:
                self._on_activate(index, self._items[index])
            return True
        return self.snap_to_index(index)

    # ------------------------------------------------------------------
    # Settling
    # ------------------------------------------------------------------

    def _spring(self, velocity: float = 0.0) -> SpringProfile:
        return SpringProfile(
            stiffness=self._config.spring_stiffness,
            damping=self._config.spring_damping,
            mass=self._config.spring_mass,
            velocity=velocity,
        )

    def _settle(self, target: float, profile: AnimationProfile) -> None:
        self._state = GestureState.SETTLING
        self._settle_target = target
        logger.debug(
            "settle_started",
            start=self._offset,
            target=target,
            profile=type(profile).__name__,
        )
        self._animator.start(
            self._offset,
            target,
            profile,
            on_tick=self._on_animation_tick,
            on_done=self._on_settled,
        )

    def _on_animation_tick(self, value: float) -> None:
        if self._state is GestureState.SETTLING:
            self._set_offset(value)

    def _on_settled(self) -> None:
        if self._state is not GestureState.SETTLING:
            return
        if self._settle_target is not None:
            self._set_offset(self._settle_target)
        self._settle_target = None
        self._state = GestureState.IDLE
        logger.debug("settled", offset=self._offset, index=self.active_index)

    # ------------------------------------------------------------------
    # Offset and notification
    # ------------------------------------------------------------------

    def _set_offset(self, value: float) -> None:
        self._offset = value
        self._publish_active()

    def _publish_active(self) -> None:
        index = self.active_index
        if index == self._notified_index:
            return
        self._notified_index = index
        if index is not None and self._on_active_change is not None:
            self._on_active_change(index, self._items[index])
