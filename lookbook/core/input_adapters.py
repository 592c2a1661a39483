"""Input adapters for the rack.

Each adapter subscribes to an EventTarget on attach() and unsubscribes the
same handlers on detach(). They translate platform-shaped events into
RackController calls and never touch the offset themselves.
"""

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from lookbook.core.carousel_logic import RackController
from lookbook.core.logging import get_logger

logger = get_logger(__name__)

PRIMARY_BUTTON = 0
COARSE_POINTER_TYPES = frozenset({"touch"})

Handler = Callable[[Any], None]


@dataclass
class InputEvent:
    """Base for dispatched events; carries the default-action flag."""

    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class PointerEvent(InputEvent):
    """A pointer sample.

    Attributes:
        x: Horizontal position in pixels.
        y: Vertical position in pixels.
        timestamp: Event time in seconds.
        pointer_type: "mouse", "touch" or "pen".
        button: Button that changed state (0 is primary).
        pointer_id: Identifies the pointer across down/move/up.
    """

    x: float = 0.0
    y: float = 0.0
    timestamp: float = 0.0
    pointer_type: str = "mouse"
    button: int = PRIMARY_BUTTON
    pointer_id: int = 1


@dataclass
class WheelEvent(InputEvent):
    delta_x: float = 0.0
    delta_y: float = 0.0
    ctrl_key: bool = False


@dataclass
class KeyEvent(InputEvent):
    key: str = ""


class EventTarget(Protocol):
    """Something adapters can subscribe to, such as a window or element."""

    def add_listener(self, event_type: str, handler: Handler) -> None: ...

    def remove_listener(self, event_type: str, handler: Handler) -> None: ...


class EventHub:
    """Minimal in-process EventTarget.

    Handlers run synchronously in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Handler]] = {}

    def add_listener(self, event_type: str, handler: Handler) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: Handler) -> None:
        handlers = self._listeners.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    def dispatch(self, event_type: str, event: InputEvent) -> InputEvent:
        for handler in list(self._listeners.get(event_type, [])):
            handler(event)
        return event


class VelocityTracker:
    """Estimates pointer velocity from a short window of recent samples."""

    def __init__(self, window: float = 0.1) -> None:
        self._window = window
        self._samples: deque[tuple[float, float]] = deque()

    def reset(self) -> None:
        self._samples.clear()

    def add(self, timestamp: float, x: float) -> None:
        self._samples.append((timestamp, x))
        while len(self._samples) > 2 and timestamp - self._samples[0][0] > self._window:
            self._samples.popleft()

    def velocity(self) -> float:
        """Pixels per second over the window; 0 with too little history."""
        if len(self._samples) < 2:
            return 0.0
        (t0, x0), (t1, x1) = self._samples[0], self._samples[-1]
        if t1 <= t0:
            return 0.0
        return (x1 - x0) / (t1 - t0)


class _Adapter(ABC):
    """Symmetric attach/detach over a fixed set of event handlers."""

    def __init__(self, controller: RackController[Any], target: EventTarget) -> None:
        self._controller = controller
        self._target = target
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    @abstractmethod
    def _handlers(self) -> dict[str, Handler]:
        """Event type to handler; equal handlers on every call so detach matches attach."""

    def attach(self) -> None:
        if self._attached:
            return
        for event_type, handler in self._handlers().items():
            self._target.add_listener(event_type, handler)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        for event_type, handler in self._handlers().items():
            self._target.remove_listener(event_type, handler)
        self._attached = False


class PointerAdapter(_Adapter):
    """Turns pointer down/move/up/cancel into drag gestures.

    Only the primary mouse button drags, and only one pointer is tracked at a
    time. Once a move is mostly horizontal the event's default action
    (page scroll) is prevented.
    """

    def __init__(
        self,
        controller: RackController[Any],
        target: EventTarget,
        velocity_window: float = 0.1,
    ) -> None:
        super().__init__(controller, target)
        self._tracker = VelocityTracker(velocity_window)
        self._pointer_id: int | None = None
        self._pointer_type = "mouse"
        self._origin: tuple[float, float] = (0.0, 0.0)
        self._horizontal = False

    @property
    def tracking(self) -> bool:
        return self._pointer_id is not None

    def _handlers(self) -> dict[str, Handler]:
        return {
            "pointerdown": self.on_pointer_down,
            "pointermove": self.on_pointer_move,
            "pointerup": self.on_pointer_up,
            "pointercancel": self.on_pointer_cancel,
        }

    def on_pointer_down(self, event: PointerEvent) -> None:
        if self._pointer_id is not None:
            return
        if event.pointer_type == "mouse" and event.button != PRIMARY_BUTTON:
            return
        if not self._controller.gesture_start(event.x):
            return
        self._pointer_id = event.pointer_id
        self._pointer_type = event.pointer_type
        self._origin = (event.x, event.y)
        self._horizontal = False
        self._tracker.reset()
        self._tracker.add(event.timestamp, event.x)

    def on_pointer_move(self, event: PointerEvent) -> None:
        if event.pointer_id != self._pointer_id:
            return
        dx = event.x - self._origin[0]
        dy = event.y - self._origin[1]
        if not self._horizontal and abs(dx) > abs(dy):
            self._horizontal = True
        if self._horizontal:
            event.prevent_default()
        self._tracker.add(event.timestamp, event.x)
        self._controller.gesture_move(event.x)

    def on_pointer_up(self, event: PointerEvent) -> None:
        if event.pointer_id != self._pointer_id:
            return
        self._tracker.add(event.timestamp, event.x)
        velocity = self._tracker.velocity()
        coarse = self._pointer_type in COARSE_POINTER_TYPES
        self._release()
        self._controller.gesture_end(event.x, velocity, coarse)

    def on_pointer_cancel(self, event: PointerEvent) -> None:
        if event.pointer_id != self._pointer_id:
            return
        self._release()
        self._controller.gesture_cancel()

    def _release(self) -> None:
        self._pointer_id = None
        self._horizontal = False
        self._tracker.reset()

    def detach(self) -> None:
        # Never leave the controller in DRAGGING without listeners
        if self._pointer_id is not None:
            self._release()
            self._controller.gesture_cancel()
        super().detach()


class WheelAdapter(_Adapter):
    """Feeds wheel deltas to the rack; pinch-zoom (ctrl+wheel) is swallowed."""

    def _handlers(self) -> dict[str, Handler]:
        return {"wheel": self.on_wheel}

    def on_wheel(self, event: WheelEvent) -> None:
        event.prevent_default()
        if event.ctrl_key:
            return
        self._controller.wheel(event.delta_x, event.delta_y)


class KeyboardAdapter(_Adapter):
    """Forwards arrow keys; suppresses their default only when consumed."""

    def _handlers(self) -> dict[str, Handler]:
        return {"keydown": self.on_key_down}

    def on_key_down(self, event: KeyEvent) -> None:
        if self._controller.key(event.key):
            event.prevent_default()
