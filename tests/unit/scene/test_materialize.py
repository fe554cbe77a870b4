"""Tests for turning placements into scene nodes."""

from __future__ import annotations

import pytest

from circlr.core.layout.errors import (
    InvalidParameterError,
    PluginErrorCode,
    SkipPolicyViolation,
    UnsupportedSelectionError,
)
from circlr.core.layout.models import LayoutParameters, SpecificSkip
from circlr.core.scene.materialize import (
    GROUP_NAME,
    ORIGIN_NAME,
    dissolve_pattern,
    materialize_pattern,
    resolve_template,
)
from circlr.core.scene.shared_data import load_layout_settings, read_parent_group
from circlr.core.selection.classifier import is_updateable


class TestResolveTemplate:
    """Test template resolution."""

    def test_component_is_its_own_template(self, scene):
        """Selected components are used directly."""
        component = scene.add_node("COMPONENT")
        assert resolve_template(scene, component) is component

    def test_parent_component(self, scene):
        """Children of a component resolve to the component."""
        component = scene.add_node("COMPONENT")
        child = scene.add_node("RECTANGLE", parent=component)
        assert resolve_template(scene, child) is component

    def test_componentizes_plain_nodes(self, scene, rectangle):
        """Other nodes are wrapped into a new component."""
        template = resolve_template(scene, rectangle)
        assert template.type == "COMPONENT"
        assert rectangle.parent is template


class TestMaterializePattern:
    """Test pattern generation."""

    def test_structure(self, scene, rectangle, quarter_params):
        """One group holding the origin and the other instances."""
        refs = materialize_pattern(scene, rectangle, quarter_params)

        group = scene.get_node(refs.group_id)
        template = scene.get_node(refs.template_id)
        assert refs.selection_id == rectangle.id
        assert group.name == GROUP_NAME
        assert template.name == ORIGIN_NAME
        assert scene.page.children == [group]
        assert group.children[0] is template
        assert [child.type for child in group.children] == [
            "COMPONENT",
            "INSTANCE",
            "INSTANCE",
            "INSTANCE",
        ]

    def test_origin_stays_in_place(self, scene, rectangle, quarter_params):
        """The origin keeps the pose of the selected element."""
        refs = materialize_pattern(scene, rectangle, quarter_params)
        template = scene.get_node(refs.template_id)
        assert (template.x, template.y) == pytest.approx((10, 20))
        assert template.rotation == pytest.approx(0)

    def test_origin_rotation_rounded(self, scene, quarter_params):
        """The origin takes the anchor placement, rotated to whole degrees."""
        node = scene.add_node("RECTANGLE", width=100, height=100, x=10, y=20, rotation=12.4)
        refs = materialize_pattern(scene, node, quarter_params)
        template = scene.get_node(refs.template_id)
        assert (template.x, template.y) == pytest.approx((10, 20))
        assert template.rotation == pytest.approx(12)

    def test_instance_placements(self, scene, rectangle, quarter_params):
        """Instances land on the circle around the origin."""
        refs = materialize_pattern(scene, rectangle, quarter_params)
        instances = scene.get_node(refs.group_id).children[1:]

        assert [(i.x, i.y) for i in instances] == [
            pytest.approx((210, 120)),
            pytest.approx((110, 320)),
            pytest.approx((-90, 220)),
        ]
        assert [round(i.rotation) % 360 for i in instances] == [270, 180, 90]
        assert all(i.main_component.id == refs.template_id for i in instances)

    def test_skipped_instances_removed(self, scene, rectangle):
        """Skipped instances are not left in the group."""
        params = LayoutParameters(
            count=4, radius=50, sweep_angle_deg=270, skip_policy=SpecificSkip(indices={3})
        )
        refs = materialize_pattern(scene, rectangle, params)
        group = scene.get_node(refs.group_id)
        assert len(group.children) == 3
        assert [(i.x, i.y) for i in group.children[1:]] == [
            pytest.approx((210, 120)),
            pytest.approx((-90, 220)),
        ]

    def test_settings_stored(self, scene, rectangle, quarter_params):
        """Template and selection both record the pattern."""
        refs = materialize_pattern(scene, rectangle, quarter_params)
        template = scene.get_node(refs.template_id)

        for node in (template, rectangle):
            assert read_parent_group(scene, node) == refs.group_id
            assert load_layout_settings(scene, node) == quarter_params
        assert is_updateable(rectangle, lambda n: read_parent_group(scene, n))

    def test_regenerate_replaces_previous_group(self, scene, rectangle, quarter_params):
        """Generating again from the same selection replaces the old pattern."""
        first = materialize_pattern(scene, rectangle, quarter_params)
        old_group = scene.get_node(first.group_id)

        params = LayoutParameters(count=6, radius=80)
        second = materialize_pattern(scene, rectangle, params)

        assert old_group.removed
        assert second.template_id == first.template_id
        assert second.group_id != first.group_id
        assert scene.page.children == [scene.get_node(second.group_id)]
        assert len(scene.get_node(second.group_id).children) == 6
        assert load_layout_settings(scene, rectangle) == params

        template = scene.get_node(second.template_id)
        assert (template.x, template.y) == pytest.approx((10, 20))

    def test_unsupported_selection(self, scene):
        """Unsupported node types are rejected."""
        node = scene.add_node("SLICE")
        with pytest.raises(UnsupportedSelectionError):
            materialize_pattern(scene, node, LayoutParameters(count=4, radius=10))

    def test_invalid_parameters_leave_scene_untouched(self, scene, rectangle):
        """Parameter errors are raised before anything is created."""
        before = scene.nodes()
        with pytest.raises(InvalidParameterError):
            materialize_pattern(scene, rectangle, LayoutParameters(count=4, radius=-1))
        assert scene.nodes() == before
        assert rectangle.parent is scene.page

    def test_skip_violation_leaves_scene_untouched(self, scene, rectangle):
        """Skipping the anchor is refused up front."""
        params = LayoutParameters(count=4, radius=10, skip_policy=SpecificSkip(indices={1}))
        with pytest.raises(SkipPolicyViolation) as exc_info:
            materialize_pattern(scene, rectangle, params)
        assert exc_info.value.code is PluginErrorCode.CANT_SKIP_FIRST_INDEX
        assert rectangle.parent is scene.page

    def test_component_selection(self, scene, quarter_params):
        """Selected components keep their id as the template."""
        component = scene.add_node("COMPONENT", width=50, height=50, x=0, y=0)
        refs = materialize_pattern(scene, component, quarter_params)
        assert refs.template_id == component.id
        assert component.name == ORIGIN_NAME


class TestDissolvePattern:
    """Test removing a generated pattern."""

    def test_dissolve(self, scene, rectangle, quarter_params):
        """The group goes away and the template stays where the anchor was."""
        refs = materialize_pattern(scene, rectangle, quarter_params)
        template = dissolve_pattern(scene, refs)

        assert template is not None
        assert scene.get_node(refs.group_id).removed
        assert scene.page.children == [template]
        assert (template.x, template.y) == pytest.approx((10, 20))
        assert read_parent_group(scene, template) == ""
        assert read_parent_group(scene, rectangle) == ""
        assert not is_updateable(rectangle, lambda n: read_parent_group(scene, n))

    def test_dissolve_twice(self, scene, rectangle, quarter_params):
        """Dissolving an already dissolved pattern is harmless."""
        refs = materialize_pattern(scene, rectangle, quarter_params)
        dissolve_pattern(scene, refs)
        assert dissolve_pattern(scene, refs) is not None
