"""Tests for pointer, wheel and keyboard adapters."""

import pytest

from lookbook.core.carousel_logic import GestureState
from lookbook.core.input_adapters import (
    EventHub,
    KeyboardAdapter,
    KeyEvent,
    PointerAdapter,
    PointerEvent,
    VelocityTracker,
    WheelAdapter,
    WheelEvent,
    _Adapter,
)
from tests.mocks.rack import settle


class TestVelocityTracker:
    def test_needs_two_samples(self) -> None:
        tracker = VelocityTracker()
        assert tracker.velocity() == 0.0
        tracker.add(0.0, 10.0)
        assert tracker.velocity() == 0.0

    def test_velocity_over_window(self) -> None:
        tracker = VelocityTracker(window=0.1)
        tracker.add(0.00, 0.0)
        tracker.add(0.05, -50.0)
        tracker.add(0.10, -100.0)
        assert tracker.velocity() == pytest.approx(-1000.0)

    def test_old_samples_are_dropped(self) -> None:
        tracker = VelocityTracker(window=0.1)
        tracker.add(0.0, 0.0)
        tracker.add(0.5, 0.0)
        tracker.add(0.55, 100.0)
        tracker.add(0.6, 200.0)
        assert tracker.velocity() == pytest.approx(2000.0)

    def test_same_timestamp_reports_zero(self) -> None:
        tracker = VelocityTracker()
        tracker.add(1.0, 0.0)
        tracker.add(1.0, 50.0)
        assert tracker.velocity() == 0.0

    def test_reset(self) -> None:
        tracker = VelocityTracker()
        tracker.add(0.0, 0.0)
        tracker.add(0.05, 50.0)
        tracker.reset()
        assert tracker.velocity() == 0.0


class TestEventHub:
    def test_dispatch_runs_handlers_in_order(self) -> None:
        hub = EventHub()
        seen: list[str] = []
        hub.add_listener("keydown", lambda event: seen.append("first"))
        hub.add_listener("keydown", lambda event: seen.append("second"))
        event = KeyEvent(key="a")
        assert hub.dispatch("keydown", event) is event
        assert seen == ["first", "second"]

    def test_remove_unknown_handler_is_harmless(self) -> None:
        hub = EventHub()
        hub.remove_listener("wheel", print)
        assert hub.listener_count() == 0


class TestAttachDetach:
    def test_attach_and_detach_are_symmetric(self, make_controller) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        adapters = [
            PointerAdapter(controller, hub),
            WheelAdapter(controller, hub),
            KeyboardAdapter(controller, hub),
        ]
        for adapter in adapters:
            adapter.attach()
        assert hub.listener_count() == 6
        assert hub.listener_count("pointermove") == 1

        for adapter in adapters:
            adapter.detach()
        assert hub.listener_count() == 0
        assert not any(adapter.attached for adapter in adapters)

    def test_base_adapter_requires_handlers(self, make_controller) -> None:
        controller, _, _ = make_controller()
        with pytest.raises(TypeError):
            _Adapter(controller, EventHub())  # type: ignore[abstract]

    def test_attach_twice_registers_once(self, make_controller) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        adapter = WheelAdapter(controller, hub)
        adapter.attach()
        adapter.attach()
        assert hub.listener_count("wheel") == 1
        adapter.detach()
        adapter.detach()
        assert hub.listener_count("wheel") == 0

    def test_detached_adapter_ignores_events(self, make_controller) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        adapter = KeyboardAdapter(controller, hub)
        adapter.attach()
        adapter.detach()
        event = hub.dispatch("keydown", KeyEvent(key="ArrowRight"))
        assert not event.default_prevented
        assert controller.state is GestureState.IDLE


class TestPointerAdapter:
    @pytest.fixture
    def rig(self, make_controller):
        controller, _, _ = make_controller()
        hub = EventHub()
        adapter = PointerAdapter(controller, hub)
        adapter.attach()
        return controller, hub, adapter

    def test_mouse_drag_and_release_snaps(self, rig, animator) -> None:
        controller, hub, _ = rig
        hub.dispatch("pointerdown", PointerEvent(x=100, timestamp=0.0))
        hub.dispatch("pointermove", PointerEvent(x=0, timestamp=0.5))
        hub.dispatch("pointermove", PointerEvent(x=-50, timestamp=1.0))
        assert controller.offset == -150.0
        hub.dispatch("pointerup", PointerEvent(x=-50, timestamp=1.0))
        assert controller.state is GestureState.SETTLING
        settle(animator)
        assert controller.offset == -288.0

    def test_touch_release_coasts(self, rig, animator) -> None:
        controller, hub, _ = rig
        hub.dispatch("pointerdown", PointerEvent(x=300, timestamp=0.0, pointer_type="touch"))
        hub.dispatch("pointermove", PointerEvent(x=200, timestamp=0.05, pointer_type="touch"))
        hub.dispatch("pointerup", PointerEvent(x=100, timestamp=0.1, pointer_type="touch"))
        # -200px drag at -2000 px/s projects 800px further
        assert controller.settle_target == pytest.approx(-1000.0)
        settle(animator)
        assert controller.offset == pytest.approx(-1000.0)

    def test_pen_counts_as_fine_pointer(self, rig, animator) -> None:
        controller, hub, _ = rig
        hub.dispatch("pointerdown", PointerEvent(x=0, pointer_type="pen"))
        hub.dispatch("pointerup", PointerEvent(x=-100, timestamp=1.0, pointer_type="pen"))
        settle(animator)
        assert controller.offset % 288.0 == 0.0

    def test_secondary_mouse_button_is_ignored(self, rig) -> None:
        controller, hub, adapter = rig
        hub.dispatch("pointerdown", PointerEvent(x=100, button=2))
        assert not adapter.tracking
        assert controller.state is GestureState.IDLE

    def test_second_pointer_is_ignored(self, rig) -> None:
        controller, hub, _ = rig
        hub.dispatch("pointerdown", PointerEvent(x=100, pointer_id=1, pointer_type="touch"))
        hub.dispatch("pointerdown", PointerEvent(x=500, pointer_id=2, pointer_type="touch"))
        hub.dispatch("pointermove", PointerEvent(x=900, pointer_id=2, pointer_type="touch"))
        assert controller.offset == 0.0
        hub.dispatch("pointermove", PointerEvent(x=80, pointer_id=1, pointer_type="touch"))
        assert controller.offset == -20.0

    def test_horizontal_move_prevents_scroll(self, rig) -> None:
        _, hub, _ = rig
        hub.dispatch("pointerdown", PointerEvent(x=100, y=100, pointer_type="touch"))
        vertical = hub.dispatch(
            "pointermove", PointerEvent(x=102, y=140, pointer_type="touch")
        )
        assert not vertical.default_prevented
        horizontal = hub.dispatch(
            "pointermove", PointerEvent(x=150, y=140, pointer_type="touch")
        )
        assert horizontal.default_prevented

    def test_pointer_cancel_settles_on_nearest_card(self, rig, animator) -> None:
        controller, hub, adapter = rig
        hub.dispatch("pointerdown", PointerEvent(x=0))
        hub.dispatch("pointermove", PointerEvent(x=-200, timestamp=0.1))
        hub.dispatch("pointercancel", PointerEvent(x=-200))
        assert not adapter.tracking
        settle(animator)
        assert controller.offset == -288.0

    def test_detach_mid_drag_cancels_gesture(self, rig, animator) -> None:
        controller, hub, adapter = rig
        hub.dispatch("pointerdown", PointerEvent(x=0))
        hub.dispatch("pointermove", PointerEvent(x=-40, timestamp=0.1))
        adapter.detach()
        assert controller.state is GestureState.SETTLING
        assert hub.listener_count() == 0
        settle(animator)
        assert controller.offset == 0.0

    def test_tap_survives_small_jitter(self, make_controller) -> None:
        controller, _, activations = make_controller()
        hub = EventHub()
        PointerAdapter(controller, hub).attach()
        hub.dispatch("pointerdown", PointerEvent(x=100))
        hub.dispatch("pointermove", PointerEvent(x=104, timestamp=0.02))
        hub.dispatch("pointerup", PointerEvent(x=103, timestamp=0.04))
        assert controller.card_tap(0) is True
        assert activations.calls == [(0, "coat")]


class TestWheelAdapter:
    def test_wheel_steps_after_threshold(self, make_controller, animator) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        WheelAdapter(controller, hub).attach()
        first = hub.dispatch("wheel", WheelEvent(delta_y=50))
        assert first.default_prevented
        assert not animator.is_running
        hub.dispatch("wheel", WheelEvent(delta_y=50))
        settle(animator)
        assert controller.active_index == 1

    def test_pinch_zoom_is_ignored(self, make_controller) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        WheelAdapter(controller, hub).attach()
        event = hub.dispatch("wheel", WheelEvent(delta_y=200, ctrl_key=True))
        assert event.default_prevented
        assert controller.wheel_accumulator == 0.0


class TestKeyboardAdapter:
    def test_arrow_is_consumed(self, make_controller, animator) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        KeyboardAdapter(controller, hub).attach()
        event = hub.dispatch("keydown", KeyEvent(key="ArrowRight"))
        assert event.default_prevented
        settle(animator)
        assert controller.active_index == 1

    def test_other_keys_pass_through(self, make_controller) -> None:
        controller, _, _ = make_controller()
        hub = EventHub()
        KeyboardAdapter(controller, hub).attach()
        event = hub.dispatch("keydown", KeyEvent(key="Tab"))
        assert not event.default_prevented
