"""Rack geometry and gesture tuning.

RackConfig holds every constant the carousel uses. It is validated once,
when constructed, so the controller never has to guard against a broken
stride at runtime.
"""

from dataclasses import dataclass

from lookbook.core.errors import RackConfigurationError


@dataclass(frozen=True)
class RackLayout:
    """Card geometry for one viewport size.

    Attributes:
        card_width: Width of a card in pixels.
        card_height: Height of a card in pixels.
        stride: Distance between consecutive card origins (width + gap).
    """

    card_width: float
    card_height: float
    stride: float


@dataclass(frozen=True)
class RackConfig:
    """Geometry and physics constants for the rack carousel.

    Attributes:
        card_width: Default card width in pixels (before any resize).
        card_gap: Gap between neighbouring cards in pixels.
        aspect_ratio: Card height divided by card width.
        max_card_width: Upper bound on card width when fitting a viewport.
        viewport_fraction: Share of the viewport width a card may occupy.
        coast_projection: Seconds of velocity projected forward on a touch release.
        min_coast_duration: Shortest touch coast in seconds.
        max_coast_duration: Longest touch coast in seconds.
        coast_velocity_scale: Velocity (px/s) that maps to a one second coast.
        velocity_bias_factor: How strongly mouse fling velocity biases the snap.
        max_velocity_bias: Cap on the snap bias, in cards.
        spring_stiffness: Spring constant for snaps.
        spring_damping: Damping coefficient for snaps.
        spring_mass: Mass for snaps.
        spring_velocity_scale: Share of release velocity handed to the spring.
        wheel_threshold: Accumulated wheel delta that advances one card.
        tap_slop: Max pointer travel in pixels for a gesture to count as a tap.
        velocity_window: Seconds of pointer history used to estimate velocity.
    """

    card_width: float = 260.0
    card_gap: float = 28.0
    aspect_ratio: float = 4 / 3
    max_card_width: float = 260.0
    viewport_fraction: float = 0.72

    coast_projection: float = 0.4
    min_coast_duration: float = 0.5
    max_coast_duration: float = 2.0
    coast_velocity_scale: float = 1500.0

    velocity_bias_factor: float = 0.04
    max_velocity_bias: float = 2.0

    spring_stiffness: float = 120.0
    spring_damping: float = 18.0
    spring_mass: float = 1.2
    spring_velocity_scale: float = 0.15

    wheel_threshold: float = 80.0
    tap_slop: float = 8.0
    velocity_window: float = 0.1

    def __post_init__(self) -> None:
        if self.card_width <= 0:
            raise RackConfigurationError(
                f"card_width must be positive, got {self.card_width}"
            )
        if self.card_gap < 0:
            raise RackConfigurationError(
                f"card_gap must not be negative, got {self.card_gap}"
            )
        if self.aspect_ratio <= 0 or self.max_card_width <= 0:
            raise RackConfigurationError("aspect_ratio and max_card_width must be positive")
        if not 0 < self.viewport_fraction <= 1:
            raise RackConfigurationError(
                f"viewport_fraction must be in (0, 1], got {self.viewport_fraction}"
            )
        if self.spring_mass <= 0 or self.spring_stiffness <= 0:
            raise RackConfigurationError("spring mass and stiffness must be positive")
        if self.wheel_threshold <= 0:
            raise RackConfigurationError("wheel_threshold must be positive")

    @property
    def stride(self) -> float:
        """Stride for the default card width."""
        return self.card_width + self.card_gap

    def layout_for(self, viewport_width: float, viewport_height: float) -> RackLayout:
        """Fit cards to a viewport.

        The card takes ``viewport_fraction`` of the width, capped by
        ``max_card_width`` and by the viewport height through the aspect ratio.

        Raises:
            RackConfigurationError: If the viewport yields a non-positive stride.
        """
        if viewport_width <= 0 or viewport_height <= 0:
            raise RackConfigurationError(
                f"viewport must be positive, got {viewport_width}x{viewport_height}"
            )
        width = min(
            self.max_card_width,
            viewport_width * self.viewport_fraction,
            viewport_height / self.aspect_ratio,
        )
        return RackLayout(
            card_width=width,
            card_height=width * self.aspect_ratio,
            stride=validate_stride(width + self.card_gap),
        )


def validate_stride(stride: float) -> float:
    """Return stride unchanged, or raise if it is not strictly positive."""
    if not stride > 0:
        raise RackConfigurationError(f"stride must be positive, got {stride}")
    return stride
