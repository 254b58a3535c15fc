"""Tests for the field naming pipeline."""

import pytest

from viewbind.binding.discover import BindingDescriptor
from viewbind.binding.naming import (
    InvalidNameError,
    apply_casing,
    apply_prefix,
    ensure_unique_names,
    make_safe_field_name,
    property_name,
    rename_fields,
    strip_known_prefix,
    to_pascal_case,
    validate_class_name,
)
from viewbind.settings import GenerationSettings


def _d(name, type_name="UnityEngine.UI.Button"):
    return BindingDescriptor(type_name, name, (name,))


class TestSafeFieldName:
    def test_blank_becomes_field(self):
        assert make_safe_field_name("   ") == "field"

    def test_invalid_characters_replaced(self):
        assert make_safe_field_name("brand logo-2") == "brand_logo_2"

    def test_leading_digit_prefixed(self):
        assert make_safe_field_name("3D View") == "_3D_View"

    def test_type_name_collision_gets_suffix(self):
        assert make_safe_field_name("Button", "Button") == "Button_"
        assert make_safe_field_name("Button", "Toggle") == "Button"


class TestStages:
    def test_prefix_added(self):
        assert apply_prefix("OkButton", "btn") == "btn_OkButton"

    def test_prefix_not_repeated(self):
        assert apply_prefix("btnOk", "btn") == "btnOk"
        assert apply_prefix("BTN_Ok", "btn") == "BTN_Ok"

    def test_empty_prefix_is_noop(self):
        assert apply_prefix("OkButton", "") == "OkButton"

    def test_casing(self):
        assert apply_casing("btn_OkButton") == "_btnOkButton"
        assert apply_casing("Title") == "_title"

    def test_pascal_case_splits_on_underscores_and_spaces(self):
        assert to_pascal_case("img_brand logo") == "ImgBrandLogo"


class TestUniqueness:
    def test_collisions_numbered_in_order(self):
        ds = [_d("item"), _d("item"), _d("item")]
        ensure_unique_names(ds)
        assert [d.field_name for d in ds] == ["item", "item_1", "item_2"]

    def test_suffix_skips_taken_names(self):
        ds = [_d("x"), _d("x_1"), _d("x")]
        ensure_unique_names(ds)
        assert [d.field_name for d in ds] == ["x", "x_1", "x_2"]


class TestRenameFields:
    def test_ok_button_example(self, settings):
        ds = rename_fields([_d("OkButton")], settings)
        assert ds[0].field_name == "_btnOkButton"

    def test_stages_can_be_disabled(self):
        s = GenerationSettings(use_type_prefix=False, underscore_camel_case=False)
        ds = rename_fields([_d("OkButton"), _d("OkButton")], s)
        assert [d.field_name for d in ds] == ["OkButton", "OkButton_1"]

    def test_type_without_prefix(self, settings):
        ds = rename_fields([_d("Health", "Game.Health")], settings)
        assert ds[0].field_name == "_health"


class TestPropertyName:
    def test_strips_known_prefix(self, settings):
        assert property_name("_btnOkButton", settings) == "OkButton"

    def test_keeps_prefix_when_disabled(self):
        s = GenerationSettings(strip_prefix_in_properties=False)
        assert property_name("_btnOkButton", s) == "BtnOkButton"

    def test_longest_prefix_wins(self):
        assert strip_known_prefix("inputUser", ["in", "input"]) == "User"

    def test_never_strips_to_empty_or_digit(self):
        assert strip_known_prefix("btn", ["btn"]) == "btn"
        assert strip_known_prefix("btn1", ["btn"]) == "btn1"


class TestValidateClassName:
    @pytest.mark.parametrize("name", ["LoginPanel", "_Panel", "Panel2"])
    def test_valid(self, name):
        validate_class_name(name, require_uppercase=name[0] != "_")

    @pytest.mark.parametrize("name", ["", "Login Panel", "2Panel", "Panel-A"])
    def test_invalid_identifier(self, name):
        with pytest.raises(InvalidNameError):
            validate_class_name(name)

    def test_lowercase_rejected_when_required(self):
        with pytest.raises(InvalidNameError, match="uppercase"):
            validate_class_name("loginPanel")
        validate_class_name("loginPanel", require_uppercase=False)

    def test_is_a_value_error(self):
        assert issubclass(InvalidNameError, ValueError)
