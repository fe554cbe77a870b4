"""Plugin session: wires UI messages to the layout core and the scene.

One ``RadialSession`` per open plugin window. It owns the current
parameters, the selection classification and the state machine; nothing is
kept in module globals. All core failures are non-fatal here: they are
logged, the offending update is dropped and the previous parameters (and
any preview) stay as they were.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from circlr.core.config.models import PluginConfig
from circlr.core.layout.engine import validate_parameters
from circlr.core.layout.errors import SkipPolicyViolation, UnsupportedSelectionError
from circlr.core.layout.models import BoundingBox, LayoutParameters, LayoutPatch, SkipPolicy
from circlr.core.layout.skip import enforce_skip_policy, toggle_skip_index
from circlr.core.layout.sweep import adaptive_radius, rescale_sweep
from circlr.core.messaging.boundary import MessageValidationError, parse_message
from circlr.core.messaging.models import (
    ApplyMessage,
    ErrorMessage,
    InputMessage,
    Message,
    PreviewToggleMessage,
    SelectionChangeMessage,
)
from circlr.core.preview.projector import PreviewFrame, PreviewProjector
from circlr.core.scene.materialize import PatternRefs, dissolve_pattern, materialize_pattern
from circlr.core.scene.protocols import NodeHandle, SceneOps
from circlr.core.scene.shared_data import load_layout_settings, read_parent_group
from circlr.core.selection.classifier import (
    SelectionState,
    can_apply,
    classify_selection,
    describe_selection,
    is_updateable,
)
from circlr.core.session.debounce import Debouncer
from circlr.core.session.state import Committing, Idle, Previewing, SessionState

logger = logging.getLogger(__name__)

# Selection size assumed before anything is selected
DEFAULT_BOX = BoundingBox(width=100, height=100)


class RadialSession:
    """Message-driven controller for one plugin window.

    Args:
        ops: Scene collaborator.
        config: Plugin configuration; defaults when None.
        emit: Called with every outbound message. Messages are also kept in
            ``outbox`` until drained.
        clock: Monotonic clock in seconds, for debouncing.

    Example:
        >>> from circlr.core.scene.memory import InMemoryScene
        >>> session = RadialSession(InMemoryScene())
        >>> session.params.count
        8
    """

    def __init__(
        self,
        ops: SceneOps,
        config: PluginConfig | None = None,
        emit: Callable[[Message], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ops = ops
        self.config = config or PluginConfig()
        self._emit = emit
        self.outbox: list[Message] = []

        defaults = self.config.defaults
        self.params = LayoutParameters(
            count=defaults.count,
            radius=adaptive_radius(DEFAULT_BOX),
            sweep_angle_deg=defaults.sweep_angle_deg,
            align_radially=defaults.align_radially,
        )
        self.use_adaptive_radius = defaults.adaptive_radius
        self.preview_enabled = False
        self.state: SessionState = Idle()

        self.selection: list[NodeHandle] = []
        self.selection_state = SelectionState.EMPTY

        self.projector = PreviewProjector(
            ui_width=self.config.ui.width, padding=self.config.ui.preview_padding
        )
        self._debouncer: Debouncer[LayoutPatch] = Debouncer(
            quiet_period_s=self.config.debounce_ms / 1000.0,
            clock=clock,
            merge=LayoutPatch.merged,
        )

    # Outbound

    def _send(self, message: Message) -> None:
        self.outbox.append(message)
        if self._emit is not None:
            self._emit(message)

    def drain(self) -> list[Message]:
        """Return and clear the queued outbound messages."""
        messages, self.outbox = self.outbox, []
        return messages

    # Inbound

    def handle(self, raw: Message | str | bytes | Mapping[str, Any]) -> None:
        """Dispatch one inbound UI message.

        Malformed payloads are logged and dropped.
        """
        if isinstance(raw, BaseModel):
            message = raw
        else:
            try:
                message = parse_message(raw)
            except MessageValidationError:
                return

        if isinstance(message, InputMessage):
            self.submit_patch(message.patch)
        elif isinstance(message, PreviewToggleMessage):
            self.set_preview(message.enabled)
        elif isinstance(message, ApplyMessage):
            self.apply()
        else:
            logger.warning(f"Ignoring {message.type} sent to the plugin")

    def on_selection_change(self, selection: Sequence[NodeHandle]) -> None:
        """Reclassify the selection and tell the UI about it."""
        if isinstance(self.state, Previewing):
            ids = [node.id for node in selection]
            if ids != [self.state.anchor_ref]:
                self._clear_preview()

        self.selection = list(selection)
        self.selection_state = classify_selection(selection, self.config.supported_node_types)
        properties = describe_selection(selection)

        updateable = False
        settings: LayoutParameters | None = None
        if len(selection) == 1 and can_apply(self.selection_state):
            node = selection[0]
            updateable = is_updateable(node, lambda n: read_parent_group(self.ops, n))
            if updateable:
                settings = load_layout_settings(self.ops, node)

        if settings is not None:
            self.params = settings
        elif (
            self.use_adaptive_radius
            and properties.width is not None
            and properties.height is not None
        ):
            box = BoundingBox(width=properties.width, height=properties.height)
            self.params = self.params.model_copy(update={"radius": adaptive_radius(box)})

        self._send(
            SelectionChangeMessage(
                state=self.selection_state,
                properties=properties,
                updateable=updateable,
                adaptive_radius=self.use_adaptive_radius,
                settings=settings,
            )
        )

    # Parameter input

    def submit_patch(self, patch: LayoutPatch, now: float | None = None) -> None:
        """Queue a parameter update; it takes effect on ``tick`` after the quiet period."""
        self._debouncer.submit(patch, now)

    def tick(self, now: float | None = None) -> bool:
        """Apply the queued update if its quiet period has elapsed."""
        patch = self._debouncer.poll(now)
        if patch is None:
            return False
        return self.apply_patch(patch)

    def apply_patch(self, patch: LayoutPatch) -> bool:
        """Validate and apply ``patch`` immediately.

        Returns:
            True if the parameters changed; False if the patch was rejected
            (the previous parameters are kept).
        """
        updates = patch.updates()
        if not updates:
            return False

        new_count = updates.get("count")
        if (
            isinstance(new_count, int)
            and new_count >= 2
            and "sweep_angle_deg" not in updates
            and self.params.count >= 2
        ):
            updates["sweep_angle_deg"] = rescale_sweep(
                self.params.sweep_angle_deg, self.params.count, new_count
            )

        try:
            candidate = self.params.with_patch(LayoutPatch(**updates))
            validate_parameters(candidate)
            enforce_skip_policy(candidate)
        except SkipPolicyViolation as e:
            logger.info(f"Reverted skip policy: {e}")
            self._send(ErrorMessage(code=e.code))
            return False
        except ValueError as e:
            logger.warning(f"Rejected parameter update {updates}: {e}")
            return False

        self.params = candidate
        if "radius" in updates:
            # The user took over the radius
            self.use_adaptive_radius = False
        if isinstance(self.state, Previewing):
            self._refresh_preview()
        return True

    def toggle_skip(self, number: int) -> bool:
        """Toggle a 1-based instance in the specific skip set (preview click)."""
        policy: SkipPolicy = toggle_skip_index(self.params.skip_policy, number)
        return self.apply_patch(LayoutPatch(skip_policy=policy))

    # Preview

    def preview_frame(self) -> PreviewFrame | None:
        """Viewport preview for the current selection, None without a usable selection."""
        if len(self.selection) != 1 or not can_apply(self.selection_state):
            return None
        node = self.selection[0]
        box = BoundingBox(width=node.width, height=node.height)
        return self.projector.project(box, node.rotation, self.params)

    def set_preview(self, enabled: bool) -> None:
        """Switch the live in-scene preview on or off."""
        self.preview_enabled = enabled
        if enabled:
            self._refresh_preview()
        else:
            self._clear_preview()

    def _refresh_preview(self) -> None:
        if not self.preview_enabled:
            return
        if len(self.selection) != 1 or not can_apply(self.selection_state):
            return

        node = self.selection[0]
        if isinstance(self.state, Previewing):
            committed = self.state.committed
            self._clear_preview(restore=False)
        else:
            committed = self._committed_settings(node)

        try:
            refs = materialize_pattern(
                self.ops,
                node,
                self.params,
                supported_types=self.config.supported_node_types,
            )
        except SkipPolicyViolation as e:
            self._send(ErrorMessage(code=e.code))
            self._restore_committed(node.id, committed)
            return
        except (ValueError, UnsupportedSelectionError) as e:
            logger.warning(f"Preview not generated: {e}")
            self._restore_committed(node.id, committed)
            return

        self.state = Previewing(
            anchor_ref=refs.selection_id,
            group_ref=refs.group_id,
            template_ref=refs.template_id,
            committed=committed,
        )

    def _clear_preview(self, restore: bool = True) -> None:
        """Dissolve the preview; with ``restore``, bring back the pattern it replaced."""
        if not isinstance(self.state, Previewing):
            return
        state = self.state
        refs = PatternRefs(
            selection_id=state.anchor_ref,
            template_id=state.template_ref,
            group_id=state.group_ref,
        )
        dissolve_pattern(self.ops, refs)
        self.state = Idle()
        if restore:
            self._restore_committed(state.anchor_ref, state.committed)

    def _committed_settings(self, node: NodeHandle) -> LayoutParameters | None:
        if not is_updateable(node, lambda n: read_parent_group(self.ops, n)):
            return None
        return load_layout_settings(self.ops, node)

    def _restore_committed(self, node_id: str, committed: LayoutParameters | None) -> None:
        if committed is None:
            return
        node = self.ops.get_node(node_id)
        if node is None or node.removed:
            return
        try:
            materialize_pattern(
                self.ops, node, committed, supported_types=self.config.supported_node_types
            )
        except (SkipPolicyViolation, ValueError, UnsupportedSelectionError) as e:
            logger.warning(f"Could not restore the committed pattern: {e}")

    # Commit

    def apply(self) -> PatternRefs | None:
        """Generate the pattern for good.

        A queued parameter update is applied first. Any preview is replaced
        by the committed pattern.
        """
        pending = self._debouncer.flush()
        if pending is not None:
            self.apply_patch(pending)

        if len(self.selection) != 1 or not can_apply(self.selection_state):
            logger.warning(f"Cannot apply with selection state {self.selection_state.value}")
            return None

        node = self.selection[0]
        committed = self.state.committed if isinstance(self.state, Previewing) else None
        self._clear_preview(restore=False)
        self.state = Committing()
        try:
            refs = materialize_pattern(
                self.ops,
                node,
                self.params,
                supported_types=self.config.supported_node_types,
            )
        except SkipPolicyViolation as e:
            self._send(ErrorMessage(code=e.code))
            self._restore_committed(node.id, committed)
            return None
        except (ValueError, UnsupportedSelectionError) as e:
            logger.warning(f"Pattern not generated: {e}")
            self._restore_committed(node.id, committed)
            return None
        finally:
            self.state = Idle()

        self.preview_enabled = False
        self.on_selection_change(self.selection)
        return refs
