"""Settle animations for the rack.

The controller only asks for "move the offset from here to there with this
profile"; how that motion is integrated frame by frame lives here, behind the
Animator protocol.

FrameAnimator does not own a clock. Whatever drives frames (a UI toolkit's
frame callback, a test, or run_frames below) calls advance(dt) with the
elapsed seconds, and the animator reports values through on_tick.

Example:
    animator = FrameAnimator()
    animator.start(0.0, -288.0, SpringProfile(), on_tick=print, on_done=done)
    while animator.advance(1 / 60):
        pass
"""

import asyncio
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


def ease_out_cubic(progress: float) -> float:
    """Decelerating curve: fast start, gentle stop."""
    return 1 - (1 - progress) ** 3


@dataclass(frozen=True)
class SpringProfile:
    """Damped spring toward the target.

    Attributes:
        stiffness: Spring constant.
        damping: Damping coefficient.
        mass: Mass of the moving body.
        velocity: Initial velocity in px/s.
        rest_delta: Distance from target under which the spring may stop.
        rest_speed: Speed under which the spring may stop.
    """

    stiffness: float = 120.0
    damping: float = 18.0
    mass: float = 1.2
    velocity: float = 0.0
    rest_delta: float = 0.5
    rest_speed: float = 10.0


@dataclass(frozen=True)
class TweenProfile:
    """Fixed-duration eased move toward the target.

    Attributes:
        duration: Length of the move in seconds.
        easing: Maps progress in [0, 1] to eased progress in [0, 1].
    """

    duration: float
    easing: Callable[[float], float] = field(default=ease_out_cubic)


AnimationProfile = SpringProfile | TweenProfile


class Animator(Protocol):
    """Drives a single value from one number to another over time."""

    @property
    def is_running(self) -> bool: ...

    def start(
        self,
        start: float,
        target: float,
        profile: AnimationProfile,
        on_tick: Callable[[float], None],
        on_done: Callable[[], None],
    ) -> None:
        """Begin animating, replacing any running animation.

        The replaced animation's on_done is not called.
        """
        ...

    def cancel(self) -> None:
        """Stop the running animation without calling its on_done."""
        ...


class _Motion(ABC):
    def __init__(
        self,
        start: float,
        target: float,
        on_tick: Callable[[float], None],
        on_done: Callable[[], None],
    ) -> None:
        self.value = start
        self.start = start
        self.target = target
        self.velocity = 0.0
        self.on_tick = on_tick
        self.on_done = on_done

    @abstractmethod
    def step(self, dt: float) -> bool:
        """Advance by dt seconds; return True once the motion has finished."""


class _SpringMotion(_Motion):
    # Largest integration step; keeps the semi-implicit Euler stable
    # regardless of how irregular the frame times are.
    MAX_STEP = 1 / 240

    def __init__(self, start, target, profile: SpringProfile, on_tick, on_done) -> None:
        super().__init__(start, target, on_tick, on_done)
        self.profile = profile
        self.velocity = profile.velocity

    def step(self, dt: float) -> bool:
        p = self.profile
        substeps = max(1, math.ceil(dt / self.MAX_STEP))
        h = dt / substeps
        for _ in range(substeps):
            force = -p.stiffness * (self.value - self.target) - p.damping * self.velocity
            self.velocity += force / p.mass * h
            self.value += self.velocity * h

        if (
            abs(self.velocity) < p.rest_speed
            and abs(self.target - self.value) < p.rest_delta
        ):
            self.value = self.target
            self.velocity = 0.0
            return True
        return False


class _TweenMotion(_Motion):
    def __init__(self, start, target, profile: TweenProfile, on_tick, on_done) -> None:
        super().__init__(start, target, on_tick, on_done)
        self.profile = profile
        self.elapsed = 0.0

    def step(self, dt: float) -> bool:
        self.elapsed += dt
        duration = self.profile.duration
        progress = 1.0 if duration <= 0 else min(1.0, self.elapsed / duration)
        previous = self.value
        if progress >= 1.0:
            self.value = self.target
        else:
            eased = self.profile.easing(progress)
            self.value = self.start + (self.target - self.start) * eased
        self.velocity = (self.value - previous) / dt if dt > 0 else 0.0
        return progress >= 1.0


class FrameAnimator:
    """Animator advanced explicitly, one frame at a time."""

    def __init__(self) -> None:
        self._motion: _Motion | None = None

    @property
    def is_running(self) -> bool:
        return self._motion is not None

    @property
    def value(self) -> float | None:
        """Current animated value, or None when idle."""
        return self._motion.value if self._motion else None

    @property
    def velocity(self) -> float:
        return self._motion.velocity if self._motion else 0.0

    def start(
        self,
        start: float,
        target: float,
        profile: AnimationProfile,
        on_tick: Callable[[float], None],
        on_done: Callable[[], None],
    ) -> None:
        if isinstance(profile, SpringProfile):
            self._motion = _SpringMotion(start, target, profile, on_tick, on_done)
        elif isinstance(profile, TweenProfile):
            self._motion = _TweenMotion(start, target, profile, on_tick, on_done)
        else:
            raise TypeError(f"Unsupported animation profile: {profile!r}")

    def cancel(self) -> None:
        self._motion = None

    def advance(self, dt: float) -> bool:
        """Step the running animation by dt seconds.

        Returns:
            True while an animation is still running after this frame.
        """
        motion = self._motion
        if motion is None:
            return False

        finished = motion.step(max(dt, 0.0))
        motion.on_tick(motion.value)

        # on_tick may have cancelled or replaced this motion
        if self._motion is not motion:
            return self.is_running

        if finished:
            self._motion = None
            motion.on_done()
        return self.is_running


async def run_frames(animator: FrameAnimator, frame_interval: float = 1 / 60) -> None:
    """Advance ``animator`` on the event loop until it goes idle.

    Frame times are measured with the loop clock, so a late frame advances the
    animation by the real elapsed time rather than by ``frame_interval``.
    """
    loop = asyncio.get_running_loop()
    last = loop.time()
    while animator.is_running:
        await asyncio.sleep(frame_interval)
        now = loop.time()
        animator.advance(now - last)
        last = now
