"""Pure geometry for the rack carousel.

Everything here is a function of (offset, stride, count) and holds no state:
where a card sits relative to the center, how it should look there, which
card is active, and where a released drag should come to rest.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum

from lookbook.core.config import RackConfig

# distance (in cards) -> value
SCALE_STOPS: tuple[tuple[float, float], ...] = (
    (-1.5, 0.82),
    (-1.0, 0.85),
    (0.0, 1.0),
    (1.0, 0.85),
    (1.5, 0.82),
)
OPACITY_STOPS: tuple[tuple[float, float], ...] = (
    (-2.0, 0.0),
    (-1.5, 0.6),
    (-0.5, 0.75),
    (0.0, 1.0),
    (0.5, 0.75),
    (1.5, 0.6),
    (2.0, 0.0),
)

CENTER_RADIUS = 0.3
NEAR_RADIUS = 0.8
OUTER_RADIUS = 1.3


class StackTier(IntEnum):
    """Paint order for cards; higher tiers draw on top."""

    BACK = 0
    OUTER = 10
    NEAR = 20
    CENTER = 30


class ShadowIntensity(Enum):
    STRONG = "strong"
    WEAK = "weak"


@dataclass(frozen=True)
class StyleParams:
    """Visual parameters for one card at one offset.

    Attributes:
        distance: Signed distance from the centered position, in cards.
        scale: Uniform scale factor.
        opacity: Opacity in [0, 1].
        stack_order: Paint tier.
        shadow: Shadow intensity.
    """

    distance: float
    scale: float
    opacity: float
    stack_order: StackTier
    shadow: ShadowIntensity


def interpolate(x: float, stops: tuple[tuple[float, float], ...]) -> float:
    """Piecewise-linear interpolation, clamped to the first and last stops."""
    if x <= stops[0][0]:
        return stops[0][1]
    if x >= stops[-1][0]:
        return stops[-1][1]
    for (x0, y0), (x1, y1) in zip(stops, stops[1:]):
        if x == x1:
            return y1
        if x < x1:
            return y0 + (y1 - y0) * (x - x0) / (x1 - x0)
    return stops[-1][1]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def card_distance(offset: float, index: int, stride: float) -> float:
    """Signed distance of card ``index`` from the center, in cards."""
    return (offset + index * stride) / stride


def stack_tier(distance: float) -> StackTier:
    magnitude = abs(distance)
    if magnitude < CENTER_RADIUS:
        return StackTier.CENTER
    if magnitude < NEAR_RADIUS:
        return StackTier.NEAR
    if magnitude < OUTER_RADIUS:
        return StackTier.OUTER
    return StackTier.BACK


def style_for(offset: float, index: int, stride: float) -> StyleParams:
    """Compute how card ``index`` should be drawn at ``offset``."""
    distance = card_distance(offset, index, stride)
    return StyleParams(
        distance=distance,
        scale=interpolate(distance, SCALE_STOPS),
        opacity=interpolate(distance, OPACITY_STOPS),
        stack_order=stack_tier(distance),
        shadow=(
            ShadowIntensity.STRONG
            if abs(distance) < CENTER_RADIUS
            else ShadowIntensity.WEAK
        ),
    )


def fractional_index(offset: float, stride: float) -> float:
    return -offset / stride


def clamp_index(index: int, count: int) -> int:
    return int(clamp(index, 0, count - 1))


def active_index(offset: float, stride: float, count: int) -> int | None:
    """Index of the centered card, or None for an empty track."""
    if count <= 0:
        return None
    return clamp_index(round_half_away(fractional_index(offset, stride)), count)


def offset_for_index(index: int, stride: float) -> float:
    # -0.0 would leak into comparisons and logs as "-0.0"
    return -index * stride + 0.0


def min_offset(stride: float, count: int) -> float:
    """Most negative resting offset (last card centered)."""
    return -max(count - 1, 0) * stride


def coast_target(
    offset: float, velocity: float, stride: float, count: int, config: RackConfig
) -> float:
    """Where a touch release coasts to: projected, clamped, not snapped."""
    natural_stop = offset + velocity * config.coast_projection
    return clamp(natural_stop, min_offset(stride, count), 0.0)


def coast_duration(velocity: float, config: RackConfig) -> float:
    """Seconds a touch coast lasts; faster flings coast longer."""
    return min(
        config.max_coast_duration,
        max(config.min_coast_duration, abs(velocity) / config.coast_velocity_scale),
    )


def snap_index(
    offset: float, velocity: float, stride: float, count: int, config: RackConfig
) -> int:
    """Card a mouse release snaps to, biased by fling direction and speed."""
    bias = clamp(
        -(velocity * config.velocity_bias_factor) / stride,
        -config.max_velocity_bias,
        config.max_velocity_bias,
    )
    return clamp_index(round_half_away(fractional_index(offset, stride) + bias), count)
