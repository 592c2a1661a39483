"""Core rack logic and protocols.

Platform-agnostic carousel controller, its physics and animation, input
adapters, and the protocols lookbook uses to talk to external services.
"""

from lookbook.core.animation import (
    Animator,
    FrameAnimator,
    SpringProfile,
    TweenProfile,
    run_frames,
)
from lookbook.core.carousel_logic import GestureState, RackController
from lookbook.core.config import RackConfig, RackLayout
from lookbook.core.errors import (
    ClassifiedError,
    ErrorCategory,
    PermanentError,
    RackConfigurationError,
    TransientError,
    classify_error,
    is_retryable,
)
from lookbook.core.health import (
    HealthChecker,
    HealthReport,
    ServiceCheck,
    ServiceStatus,
)
from lookbook.core.image_utils import (
    build_storage_path,
    compress_image,
    detect_media_type,
    split_data_url,
)
from lookbook.core.input_adapters import (
    EventHub,
    KeyboardAdapter,
    KeyEvent,
    PointerAdapter,
    PointerEvent,
    VelocityTracker,
    WheelAdapter,
    WheelEvent,
)
from lookbook.core.logging import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
    log_context,
    unbind_contextvars,
)
from lookbook.core.providers import ItemSuggestion, SuggestionProvider
from lookbook.core.rack_physics import ShadowIntensity, StackTier, StyleParams, style_for
from lookbook.core.rack_session import CardRenderer, RackSession

__all__ = [
    # Animation
    "Animator",
    "FrameAnimator",
    "SpringProfile",
    "TweenProfile",
    "run_frames",
    # Rack
    "GestureState",
    "RackController",
    "RackConfig",
    "RackLayout",
    "CardRenderer",
    "RackSession",
    "ShadowIntensity",
    "StackTier",
    "StyleParams",
    "style_for",
    # Input
    "EventHub",
    "KeyboardAdapter",
    "KeyEvent",
    "PointerAdapter",
    "PointerEvent",
    "VelocityTracker",
    "WheelAdapter",
    "WheelEvent",
    # Error handling
    "ClassifiedError",
    "ErrorCategory",
    "PermanentError",
    "RackConfigurationError",
    "TransientError",
    "classify_error",
    "is_retryable",
    # Health checks
    "HealthChecker",
    "HealthReport",
    "ServiceCheck",
    "ServiceStatus",
    # Image utilities
    "build_storage_path",
    "compress_image",
    "detect_media_type",
    "split_data_url",
    # Logging
    "bind_contextvars",
    "clear_contextvars",
    "configure_logging",
    "get_logger",
    "log_context",
    "unbind_contextvars",
    # Suggestions
    "ItemSuggestion",
    "SuggestionProvider",
]
