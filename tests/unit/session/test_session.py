"""Tests for the message-driven plugin session."""

from __future__ import annotations

import pytest

from circlr.core.config.models import LayoutDefaults, PluginConfig
from circlr.core.layout.errors import PluginErrorCode
from circlr.core.layout.models import LayoutPatch, SpecificSkip
from circlr.core.messaging.models import ErrorMessage, SelectionChangeMessage
from circlr.core.scene.shared_data import read_parent_group
from circlr.core.selection.classifier import SelectionState, is_updateable
from circlr.core.session import Committing, Idle, Previewing, RadialSession


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sent() -> list:
    return []


@pytest.fixture
def session(scene, clock, sent) -> RadialSession:
    return RadialSession(scene, emit=sent.append, clock=clock)


def _groups(scene):
    return [node for node in scene.page.children if node.type == "GROUP"]


def _selection_messages(messages):
    return [m for m in messages if isinstance(m, SelectionChangeMessage)]


class TestSelection:
    """Test selection handling."""

    def test_defaults(self, session):
        """Fresh sessions start idle with the configured defaults."""
        assert session.params.count == 8
        assert session.params.radius == 50
        assert session.use_adaptive_radius
        assert isinstance(session.state, Idle)
        assert session.selection_state is SelectionState.EMPTY

    def test_configured_defaults(self, scene):
        """Defaults come from the plugin config."""
        config = PluginConfig(defaults=LayoutDefaults(count=5, align_radially=False))
        session = RadialSession(scene, config=config)
        assert session.params.count == 5
        assert session.params.align_radially is False

    def test_selection_change_notifies_ui(self, session, scene, sent):
        """The UI hears about the new classification and the node's size."""
        node = scene.add_node("RECTANGLE", width=200, height=50)
        session.on_selection_change([node])

        message = sent[-1]
        assert isinstance(message, SelectionChangeMessage)
        assert message.state is SelectionState.VALID
        assert message.properties.width == 200
        assert message.updateable is False
        assert message.settings is None

    def test_adaptive_radius_follows_selection(self, session, scene):
        """Until edited, the radius follows the selection size."""
        session.on_selection_change([scene.add_node("RECTANGLE", width=200, height=50)])
        assert session.params.radius == 62.5

        session.apply_patch(LayoutPatch(radius=10))
        session.on_selection_change([scene.add_node("RECTANGLE", width=400, height=400)])
        assert session.params.radius == 10
        assert session.drain()[-1].adaptive_radius is False

    def test_empty_and_multiple(self, session, scene):
        """Non-applicable selections are reported as such."""
        session.on_selection_change([])
        assert session.selection_state is SelectionState.EMPTY
        session.on_selection_change([scene.add_node("RECTANGLE"), scene.add_node("ELLIPSE")])
        assert session.selection_state is SelectionState.MULTIPLE
        assert session.preview_frame() is None

    def test_outbox_drained(self, session):
        """Queued messages are handed out once."""
        session.on_selection_change([])
        assert len(session.drain()) == 1
        assert session.drain() == []


class TestParameterInput:
    """Test parameter updates."""

    def test_patch_applied(self, session):
        """Valid patches replace the parameters."""
        assert session.apply_patch(LayoutPatch(radius=80, align_radially=False))
        assert session.params.radius == 80
        assert session.params.align_radially is False
        assert not session.use_adaptive_radius

    def test_empty_patch(self, session):
        """Empty patches change nothing."""
        assert not session.apply_patch(LayoutPatch())

    def test_count_change_keeps_sweep_percentage(self, session):
        """Changing the count rescales the sweep."""
        assert session.params.sweep_angle_deg == pytest.approx(315)
        session.apply_patch(LayoutPatch(count=4))
        assert session.params.sweep_angle_deg == pytest.approx(270)

    def test_explicit_sweep_wins(self, session):
        """A sweep sent with the count is taken as is."""
        session.apply_patch(LayoutPatch(count=4, sweep_angle_deg=90))
        assert session.params.sweep_angle_deg == 90

    def test_invalid_patch_rejected(self, session):
        """Out-of-range values keep the previous parameters."""
        before = session.params
        assert not session.apply_patch(LayoutPatch(radius=-5))
        assert not session.apply_patch(LayoutPatch(count=1))
        assert session.params == before
        assert session.use_adaptive_radius

    def test_skip_violation_reported(self, session, sent):
        """Skip violations are reverted and the UI is told why."""
        before = session.params
        assert not session.apply_patch(LayoutPatch(skip_policy=SpecificSkip(indices={1})))
        assert session.params == before
        assert sent[-1] == ErrorMessage(code=PluginErrorCode.CANT_SKIP_FIRST_INDEX)

    def test_skip_all_reported(self, session, sent):
        """Hiding every instance but the anchor is refused."""
        policy = SpecificSkip(indices=set(range(2, 9)))
        assert not session.apply_patch(LayoutPatch(skip_policy=policy))
        assert sent[-1].code is PluginErrorCode.CANT_SKIP_ALL

    def test_toggle_skip(self, session):
        """Clicking preview items toggles them in the skip set."""
        session.toggle_skip(3)
        assert session.params.skip_policy == SpecificSkip(indices={3})
        session.toggle_skip(3)
        assert session.params.skip_policy == SpecificSkip(indices=set())

    def test_debounced_input(self, session, clock):
        """Bursts of input are merged and applied after the quiet period."""
        session.handle({"type": "EMIT_INPUT_TO_PLUGIN", "patch": {"radius": 20}})
        clock.now = 0.1
        session.handle({"type": "EMIT_INPUT_TO_PLUGIN", "patch": {"align_radially": False}})

        clock.now = 0.2
        assert not session.tick()
        assert session.params.radius == 50

        clock.now = 0.5
        assert session.tick()
        assert session.params.radius == 20
        assert session.params.align_radially is False

    def test_malformed_message_ignored(self, session):
        """Invalid payloads are dropped without raising."""
        session.handle("{broken")
        session.handle({"type": "EMIT_INPUT_TO_PLUGIN", "patch": {"colour": "red"}})
        assert session.tick(now=100.0) is False

    def test_outbound_message_ignored(self, session, caplog):
        """Messages meant for the UI are not acted upon."""
        with caplog.at_level("WARNING"):
            session.handle({"type": "UI_ERROR", "code": "CANT_SKIP_ALL"})
        assert "Ignoring UI_ERROR" in caplog.text


class TestPreview:
    """Test the live preview."""

    def test_preview_frame(self, session, rectangle):
        """The viewport preview follows the current parameters."""
        session.on_selection_change([rectangle])
        frame = session.preview_frame()
        assert frame is not None
        assert len(frame.items) == 8

    def test_preview_in_scene(self, session, scene, rectangle):
        """Enabling the preview generates a pattern; disabling removes it."""
        session.on_selection_change([rectangle])
        session.handle({"type": "EMIT_PREVIEW_CHANGE_TO_PLUGIN", "enabled": True})

        assert isinstance(session.state, Previewing)
        group = scene.get_node(session.state.group_ref)
        assert len(group.children) == 8

        session.set_preview(False)
        assert isinstance(session.state, Idle)
        assert group.removed
        assert [child.type for child in scene.page.children] == ["COMPONENT"]

    def test_preview_refreshes_on_input(self, session, scene, rectangle):
        """Parameter changes regenerate the previewed pattern."""
        session.on_selection_change([rectangle])
        session.set_preview(True)
        first_group = scene.get_node(session.state.group_ref)

        session.apply_patch(LayoutPatch(count=5))

        assert first_group.removed
        assert len(scene.get_node(session.state.group_ref).children) == 5

    def test_preview_cleared_on_selection_change(self, session, scene, rectangle):
        """Selecting something else drops the preview."""
        session.on_selection_change([rectangle])
        session.set_preview(True)
        group_id = session.state.group_ref

        session.on_selection_change([scene.add_node("ELLIPSE", width=10, height=10)])
        assert isinstance(session.state, Idle)
        assert scene.get_node(group_id).removed

    def test_preview_off_restores_committed_pattern(self, session, scene, rectangle):
        """Leaving the preview of a committed pattern brings that pattern back."""
        session.on_selection_change([rectangle])
        session.apply()
        session.set_preview(True)
        session.apply_patch(LayoutPatch(count=5))
        session.set_preview(False)

        groups = _groups(scene)
        assert [group.name for group in groups] == ["Radial Pattern"]
        assert len(groups[0].children) == 8
        assert read_parent_group(scene, rectangle) == groups[0].id
        assert is_updateable(rectangle, lambda n: read_parent_group(scene, n))
        assert isinstance(session.state, Idle)

    def test_selecting_elsewhere_restores_committed_pattern(self, session, scene, rectangle):
        """Moving the selection away from a preview keeps the committed pattern."""
        session.on_selection_change([rectangle])
        session.apply()
        session.set_preview(True)
        session.on_selection_change([scene.add_node("ELLIPSE", width=10, height=10)])

        groups = _groups(scene)
        assert len(groups) == 1
        assert len(groups[0].children) == 8
        assert read_parent_group(scene, rectangle) == groups[0].id

    def test_preview_needs_selection(self, session):
        """Without a selection, the preview stays off the scene."""
        session.set_preview(True)
        assert isinstance(session.state, Idle)


class TestApply:
    """Test committing the pattern."""

    def test_apply(self, session, scene, rectangle):
        """Applying generates the pattern and marks the selection updateable."""
        session.on_selection_change([rectangle])
        session.drain()

        session.handle({"type": "APPLY_TRANSFORMATION"})
        assert isinstance(session.state, Idle)

        groups = [node for node in scene.page.children if node.type == "GROUP"]
        assert len(groups) == 1
        assert len(groups[0].children) == 8

        message = _selection_messages(session.drain())[-1]
        assert message.state is SelectionState.IS_INSTANCE_CHILD
        assert message.updateable is True
        assert message.settings == session.params

    def test_apply_flushes_pending_input(self, session, scene, rectangle):
        """Input still in the quiet period is applied first."""
        session.on_selection_change([rectangle])
        session.submit_patch(LayoutPatch(count=3), now=0.0)

        refs = session.apply()

        assert refs is not None
        assert len(scene.get_node(refs.group_id).children) == 3

    def test_apply_replaces_preview(self, session, scene, rectangle):
        """A previewed pattern becomes the committed one."""
        session.on_selection_change([rectangle])
        session.set_preview(True)

        refs = session.apply()

        assert refs is not None
        assert scene.page.children == [scene.get_node(refs.group_id)]
        assert session.preview_enabled is False
        assert isinstance(session.state, Idle)

    def test_apply_without_selection(self, session):
        """Nothing happens without a usable selection."""
        assert session.apply() is None

    def test_reselect_adopts_stored_settings(self, scene, rectangle):
        """A new session picks up the parameters of an existing pattern."""
        first = RadialSession(scene)
        first.on_selection_change([rectangle])
        first.apply_patch(LayoutPatch(count=6, radius=33))
        first.apply()

        second = RadialSession(scene)
        second.on_selection_change([rectangle])
        assert second.params.count == 6
        assert second.params.radius == 33

    def test_committing_state_is_transient(self, session, rectangle):
        """The committing state never outlives ``apply``."""
        session.on_selection_change([rectangle])
        session.apply()
        assert not isinstance(session.state, Committing)

    def test_apply_from_preview_replaces_committed_pattern(self, session, scene, rectangle):
        """Applying a preview of a committed pattern keeps only the new pattern."""
        session.on_selection_change([rectangle])
        session.apply()
        session.set_preview(True)
        session.apply_patch(LayoutPatch(count=5))

        refs = session.apply()

        assert refs is not None
        assert _groups(scene) == [scene.get_node(refs.group_id)]
        assert len(scene.get_node(refs.group_id).children) == 5
        assert session.params.count == 5
