"""Tests for binding discovery and field collection."""

from viewbind.binding import collect_fields, discover_bindings
from viewbind.scene import BindingMarker, Capability, ObjectNode, TargetKind
from viewbind.settings import GenerationSettings

BUTTON = "UnityEngine.UI.Button"
TEXT = "UnityEngine.UI.Text"
IMAGE = "UnityEngine.UI.Image"
RECT = "UnityEngine.RectTransform"
NODE = "UnityEngine.GameObject"


def _node(name, *types, marker=None, children=None):
    return ObjectNode(name, [Capability(t) for t in types], marker, children)


class TestLoginPanel:
    def test_collected_fields(self, login_panel, settings):
        fields = [(d.type_name, d.field_name, d.path) for d in collect_fields(login_panel, settings)]
        assert fields == [
            ("TMPro.TMP_InputField", "_inputUserName", ("Form", "UserName")),
            ("TMPro.TMP_Text", "_txtTitle", ("Title",)),
            (RECT, "_rtDecor", ("Decor",)),
            (RECT, "_rtForm", ("Form",)),
            (BUTTON, "_btnOkButton", ("OkButton",)),
            (IMAGE, "_imgBrandLogo", ("Logo",)),
            ("UnityEngine.UI.Toggle", "_togRemember", ("Form", "Remember")),
        ]

    def test_ignored_subtree_excluded(self, login_panel, settings):
        paths = [d.path for d in discover_bindings(login_panel, settings)]
        assert ("Decor", "Shine") not in paths

    def test_container_marker_is_not_capability_reference(self, login_panel, settings):
        form = next(d for d in discover_bindings(login_panel, settings) if d.path == ("Form",))
        assert form.type_name == RECT
        assert not form.is_capability_reference

    def test_deterministic(self, login_panel, settings):
        first = collect_fields(login_panel, settings)
        second = collect_fields(login_panel, settings)
        assert first == second


class TestAutoInclude:
    def test_root_capability_included(self, settings):
        root = _node("Panel", RECT, BUTTON)
        [d] = discover_bindings(root, settings)
        assert d.is_root
        assert d.path_string == ""

    def test_multiple_instances_indexed(self, settings):
        root = _node("Panel", children=[_node("Label", TEXT, TEXT)])
        ds = collect_fields(root, settings)
        assert [(d.field_name, d.capability_index) for d in ds] == [
            ("_txtLabel", 0),
            ("_txtLabel_1", 1),
        ]

    def test_sibling_collision(self, settings):
        root = _node("Panel", children=[_node("Item", BUTTON), _node("Item", BUTTON)])
        assert [d.field_name for d in collect_fields(root, settings)] == ["_btnItem", "_btnItem_1"]

    def test_node_named_like_its_type(self, settings):
        root = _node("Panel", children=[_node("Button", BUTTON)])
        [d] = discover_bindings(root, settings)
        assert d.field_name == "Button_"

    def test_image_not_auto_included(self, settings):
        root = _node("Panel", children=[_node("Backdrop", IMAGE)])
        assert discover_bindings(root, settings) == []

    def test_extended_types(self):
        s = GenerationSettings(auto_include_extended=True)
        root = _node("Panel", children=[_node("List", "UnityEngine.UI.ScrollRect")])
        [d] = collect_fields(root, s)
        assert d.field_name == "_scrollList"

    def test_disabled(self):
        s = GenerationSettings(auto_include_common=False)
        root = _node("Panel", children=[_node("Ok", BUTTON)])
        assert discover_bindings(root, s) == []


class TestMarkers:
    no_auto = GenerationSettings(auto_include_common=False)

    def _single(self, node):
        root = _node("Panel", children=[node])
        [d] = discover_bindings(root, self.no_auto)
        return d

    def test_auto_prefers_interactive(self):
        d = self._single(_node("Ok", RECT, IMAGE, BUTTON, marker=BindingMarker()))
        assert d.type_name == BUTTON

    def test_auto_falls_back_to_display(self):
        d = self._single(_node("Bg", RECT, IMAGE, marker=BindingMarker()))
        assert d.type_name == IMAGE

    def test_auto_falls_back_to_container_then_node(self):
        assert self._single(_node("Box", RECT, marker=BindingMarker())).type_name == RECT
        assert self._single(_node("Empty", marker=BindingMarker())).type_name == NODE

    def test_override_name_sanitized(self):
        d = self._single(_node("Ok", BUTTON, marker=BindingMarker(field_name_override="  confirm it ")))
        assert d.field_name == "confirm_it"

    def test_capability_by_short_name(self):
        marker = BindingMarker(target_kind=TargetKind.CAPABILITY, capability_type_name="Text")
        d = self._single(_node("Label", TEXT, marker=marker))
        assert d.type_name == TEXT

    def test_capability_index_clamped(self):
        marker = BindingMarker(
            target_kind=TargetKind.CAPABILITY, capability_type_name=TEXT, capability_index=5,
        )
        d = self._single(_node("Label", TEXT, TEXT, marker=marker))
        assert d.capability_index == 1

    def test_absent_capability_falls_back(self):
        marker = BindingMarker(target_kind=TargetKind.CAPABILITY, capability_type_name=BUTTON)
        d = self._single(_node("Label", RECT, TEXT, marker=marker))
        assert d.type_name == RECT
        assert not d.is_capability_reference

    def test_blank_capability_type_uses_auto(self):
        marker = BindingMarker(target_kind=TargetKind.CAPABILITY, capability_type_name=" ")
        d = self._single(_node("Label", RECT, TEXT, marker=marker))
        assert d.type_name == TEXT

    def test_node_target(self):
        marker = BindingMarker(target_kind=TargetKind.NODE)
        d = self._single(_node("Ok", RECT, BUTTON, marker=marker))
        assert d.type_name == NODE
        assert not d.is_capability_reference

    def test_markers_under_ignored_subtree_skipped(self):
        inner = _node("Inner", BUTTON, marker=BindingMarker())
        outer = _node("Outer", RECT, marker=BindingMarker(ignore_subtree=True), children=[inner])
        root = _node("Panel", children=[outer])
        assert [d.path for d in discover_bindings(root, self.no_auto)] == [("Outer",)]

    def test_duplicate_of_auto_binding_dropped(self, settings):
        root = _node("Panel", children=[_node("Ok", BUTTON, marker=BindingMarker(field_name_override="confirm"))])
        [d] = discover_bindings(root, settings)
        assert d.field_name == "Ok"

    def test_short_name_index_counted_within_exact_type(self):
        def marked(index):
            marker = BindingMarker(
                target_kind=TargetKind.CAPABILITY, capability_type_name="Button", capability_index=index,
            )
            return self._single(_node("Ok", "Game.Widgets.Button", BUTTON, BUTTON, marker=marker))

        assert [(d.type_name, d.capability_index) for d in map(marked, [0, 1, 2, 7])] == [
            ("Game.Widgets.Button", 0),
            (BUTTON, 0),
            (BUTTON, 1),
            (BUTTON, 1),
        ]


TOGGLE = "UnityEngine.UI.Toggle"


def _shuffled_panel(reverse):
    def ordered(nodes):
        return list(reversed(nodes)) if reverse else nodes

    form = _node("Form", RECT, marker=BindingMarker(target_kind=TargetKind.CONTAINER), children=ordered([
        _node("Remember", RECT, TOGGLE),
        _node("Caption", RECT, TEXT, TEXT),
        _node("Anchor", marker=BindingMarker(target_kind=TargetKind.NODE)),
    ]))
    return _node("Panel", RECT, BUTTON, children=ordered([
        _node("Ok", RECT, BUTTON),
        _node("Title", RECT, TEXT),
        _node("Logo", RECT, IMAGE, marker=BindingMarker(field_name_override="brand")),
        form,
        _node("Cancel", BUTTON, IMAGE),
    ]))


class TestSiblingOrder:
    def _rows(self, root, settings):
        return [(d.type_name, d.field_name, d.path, d.capability_index) for d in collect_fields(root, settings)]

    def test_reordered_siblings_give_same_fields(self, settings):
        forward = self._rows(_shuffled_panel(reverse=False), settings)
        backward = self._rows(_shuffled_panel(reverse=True), settings)
        assert forward == backward

    def test_both_passes_contribute(self, settings):
        rows = self._rows(_shuffled_panel(reverse=True), settings)
        names = [name for _, name, _, _ in rows]
        assert "_btnOk" in names and "_togRemember" in names
        assert "_imgBrand" in names and "_rtForm" in names and "_goAnchor" in names
        assert [r for r in rows if r[1].startswith("_txtCaption")] == [
            (TEXT, "_txtCaption", ("Form", "Caption"), 0),
            (TEXT, "_txtCaption_1", ("Form", "Caption"), 1),
        ]
