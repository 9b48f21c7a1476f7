"""
test_scene.py — Tests for the in-memory drawing surface.

Tests:
- Primitive factories and the element tree
- Class handling and selection
- Bounding boxes (rects, paths, text, groups)
- Click dispatch
"""

import pytest

from ganttline.engine.scene import BBox, ElementKind, Scene, format_path, path_points


@pytest.fixture
def scene(measure) -> Scene:
    return Scene("#gantt", 1000, measure=measure)


class TestTree:
    """Tests for building and editing the tree."""

    def test_factories_append_to_root(self, scene: Scene) -> None:
        rect = scene.rect(0, 0, 10, 10)
        assert rect.kind == ElementKind.RECT
        assert rect.parent is scene.root
        assert rect.scene is scene

    def test_append_to_reparents(self, scene: Scene) -> None:
        group = scene.group(id="grid")
        rect = scene.rect(0, 0, 10, 10).append_to(group)
        assert rect.parent is group
        assert rect not in scene.root.children
        assert group.children == [rect]

    def test_remove_detaches(self, scene: Scene) -> None:
        text = scene.text(5, 5, "hello")
        text.remove()
        assert text.parent is None
        assert list(scene.iter()) == [scene.root]


class TestClasses:
    """Tests for class handling."""

    def test_add_class_splits_on_spaces(self, scene: Scene) -> None:
        el = scene.path("M 0 0").add_class("tick thick")
        assert el.classes == ["tick", "thick"]

    def test_add_class_is_idempotent(self, scene: Scene) -> None:
        el = scene.rect(0, 0, 1, 1).add_class("bar").add_class("bar")
        assert el.classes == ["bar"]

    def test_remove_and_select(self, scene: Scene) -> None:
        a = scene.group().add_class("bar-wrapper", "active")
        scene.group().add_class("bar-wrapper")
        assert len(scene.select_all("bar-wrapper")) == 2
        a.remove_class("active")
        assert scene.select_all("active") == []


class TestPathPoints:
    """Tests for SVG path parsing."""

    def test_absolute_and_relative(self) -> None:
        points = path_points("M 10 20 v 30 h -5 L 0 0")
        assert points == [(10, 20), (10, 50), (5, 50), (0, 0)]

    def test_arc_endpoint(self) -> None:
        points = path_points("M 0 0 a 5 5 0 0 1 5 5")
        assert points[-1] == (5, 5)

    def test_close_returns_to_start(self) -> None:
        points = path_points("M 1 1 L 4 1 L 4 4 Z")
        assert points[-1] == (1, 1)

    def test_must_start_with_command(self) -> None:
        with pytest.raises(ValueError):
            path_points("10 20")


class TestBBox:
    """Tests for bounding-box queries."""

    def test_rect_bbox(self, scene: Scene) -> None:
        box = scene.rect(10, 20, 30, 40).bbox()
        assert box == BBox(10, 20, 30, 40)
        assert box.x2 == 40
        assert box.y2 == 60

    def test_path_bbox(self, scene: Scene) -> None:
        box = scene.path("M 10 5 v 100").bbox()
        assert (box.x, box.y, box.width, box.height) == (10, 5, 0, 100)

    def test_middle_anchored_text(self, scene: Scene) -> None:
        box = scene.text(100, 50, "abcd", **{"font-size": 10}).bbox()
        assert box.width == pytest.approx(24)
        assert box.x == pytest.approx(88)
        assert box.x2 == pytest.approx(112)

    def test_start_anchored_text(self, scene: Scene) -> None:
        box = scene.text(100, 50, "abcd", **{"font-size": 10, "text-anchor": "start"}).bbox()
        assert box.x == pytest.approx(100)

    def test_group_bbox_is_union(self, scene: Scene) -> None:
        group = scene.group()
        scene.rect(0, 0, 10, 10).append_to(group)
        scene.rect(20, 5, 10, 10).append_to(group)
        assert group.bbox() == BBox(0, 0, 30, 15)

    def test_empty_group_has_no_bbox(self, scene: Scene) -> None:
        assert scene.group().bbox() is None


class TestSurface:
    """Tests for surface sizing and events."""

    def test_rendered_width_defaults_to_container(self, scene: Scene) -> None:
        scene.attr(width="100%")
        assert scene.rendered_width() == 1000
        scene.resize(2400)
        assert scene.rendered_width() == 2400

    def test_click_dispatch(self, scene: Scene) -> None:
        clicked = []
        el = scene.rect(0, 0, 1, 1).click(clicked.append)
        el.trigger_click()
        assert clicked == [el]

    def test_format_path(self) -> None:
        assert format_path("M {x} {y}", x=10.0, y=-2.5) == "M 10 -2.5"
