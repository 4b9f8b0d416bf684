"""Unit tests for control dispatch and the individual control renderers."""

from __future__ import annotations

from datetime import date

import pytest

from admin_forms.converters.controls import (
    ControlDispatcher,
    ControlKind,
    display_text,
    file_name,
    is_checked,
    is_literal_collection,
    item_label,
    resolve_control_kind,
)
from admin_forms.runtime.config import FormsConfig
from admin_forms.specs.context import ControlDescriptor
from admin_forms.specs.nodes import FieldOptions
from admin_forms.specs.schema import ScalarType


def _desc(field: str, value=None, errors=None) -> ControlDescriptor:
    return ControlDescriptor(
        id=f"contact_{field}",
        name=f"contact[{field}]",
        value=value,
        errors=errors,
    )


@pytest.fixture
def dispatcher(theme) -> ControlDispatcher:
    return ControlDispatcher(theme, FormsConfig())


class TestResolveControlKind:
    @pytest.mark.parametrize(
        ("scalar", "expected"),
        [
            (ScalarType.BOOLEAN, ControlKind.BOOLEAN),
            (ScalarType.TEXT, ControlKind.TEXTAREA),
            (ScalarType.DATE, ControlKind.DATE),
            (ScalarType.TIME, ControlKind.TIME),
            (ScalarType.DATETIME, ControlKind.DATETIME),
            (ScalarType.FILE, ControlKind.FILE),
            (ScalarType.STRING, ControlKind.TEXT),
            (ScalarType.INTEGER, ControlKind.TEXT),
            (ScalarType.DECIMAL, ControlKind.TEXT),
        ],
    )
    def test_scalar_table(self, scalar, expected) -> None:
        assert resolve_control_kind(scalar, FieldOptions()) == expected

    def test_type_override_names_a_kind(self) -> None:
        options = FieldOptions(type="textarea")
        assert resolve_control_kind(ScalarType.STRING, options) == ControlKind.TEXTAREA

    def test_type_override_input_type_keeps_text(self) -> None:
        options = FieldOptions(type="email")
        assert resolve_control_kind(ScalarType.STRING, options) == ControlKind.TEXT

    def test_collection_wins(self) -> None:
        options = FieldOptions(type="textarea")
        kind = resolve_control_kind(ScalarType.STRING, options, has_collection=True)
        assert kind == ControlKind.SELECT


class TestHelpers:
    def test_literal_collection_shapes(self) -> None:
        assert is_literal_collection([(1, "Red"), (2, "Black")])
        assert is_literal_collection(["small", "large"])
        assert is_literal_collection([[1, "Red"]])
        assert not is_literal_collection([])
        assert not is_literal_collection([{"id": 1, "name": "Business"}])

    def test_is_checked(self) -> None:
        assert is_checked(True)
        assert is_checked("true")
        assert is_checked("on")
        assert not is_checked("false")
        assert not is_checked(None)
        assert not is_checked(0)

    def test_display_text(self) -> None:
        assert display_text(None) is None
        assert display_text(date(2024, 1, 2)) == "2024-01-02"
        assert display_text(42) == "42"

    def test_file_name(self) -> None:
        class Upload:
            filename = "me.png"

        assert file_name(None) == ""
        assert file_name("cv.pdf") == "cv.pdf"
        assert file_name(Upload()) == "me.png"

    def test_item_label(self) -> None:
        person = {"first_name": "Ada", "last_name": "Lovelace", "name": "ada"}
        assert item_label(person, None) == "ada"
        assert item_label(person, ("first_name", "last_name")) == "Ada Lovelace"


class TestScalarControls:
    def test_boolean_emits_hidden_false_then_checkbox(self, dispatcher) -> None:
        html = str(dispatcher.render_boolean(_desc("active", True), FieldOptions()))
        assert html.count("<input") == 2
        hidden = html.index('<input type="hidden" value="false" name="contact[active]">')
        checkbox = html.index(
            '<input type="checkbox" id="contact_active" name="contact[active]" value="true"'
        )
        assert hidden < checkbox
        assert 'checked="checked"' in html

    def test_boolean_unchecked(self, dispatcher) -> None:
        html = str(dispatcher.render_boolean(_desc("active", False), FieldOptions()))
        assert html.count("<input") == 2
        assert "checked" not in html

    def test_text_input(self, dispatcher) -> None:
        html = str(dispatcher.render_text(_desc("email", "ada@example.com"), FieldOptions()))
        assert 'type="text"' in html
        assert 'id="contact_email"' in html
        assert 'name="contact[email]"' in html
        assert 'value="ada@example.com"' in html
        assert 'maxlength="255"' in html
        assert 'class="form-control"' in html

    def test_text_input_escapes_value(self, dispatcher) -> None:
        html = str(dispatcher.render_text(_desc("email", '<b>"x"</b>'), FieldOptions()))
        assert "<b>" not in html
        assert "&lt;b&gt;" in html

    def test_text_input_type_and_prompt(self, dispatcher) -> None:
        options = FieldOptions(type="email", prompt="you@example.com")
        html = str(dispatcher.render_text(_desc("email"), options))
        assert 'type="email"' in html
        assert 'placeholder="you@example.com"' in html
        assert "value=" not in html

    def test_html_opts_are_merged(self, dispatcher) -> None:
        options = FieldOptions(html_opts={"autocomplete": "off"})
        html = str(dispatcher.render_text(_desc("email"), options))
        assert 'autocomplete="off"' in html

    def test_configured_maxlength(self, theme) -> None:
        dispatcher = ControlDispatcher(theme, FormsConfig(text_maxlength=80))
        html = str(dispatcher.render_text(_desc("email"), FieldOptions()))
        assert 'maxlength="80"' in html

    def test_textarea(self, dispatcher) -> None:
        html = str(dispatcher.render_textarea(_desc("bio", "Analyst"), FieldOptions()))
        assert html == '<textarea id="contact_bio" name="contact[bio]" class="form-control">' \
            "Analyst</textarea>"

    def test_file(self, dispatcher) -> None:
        html = str(dispatcher.render_file(_desc("avatar", "me.png"), FieldOptions()))
        assert 'type="file"' in html
        assert 'value="me.png"' in html

    def test_render_appends_errors(self, dispatcher) -> None:
        desc = _desc("email", "x", errors=["unique"])
        html = str(
            dispatcher.render(ControlKind.TEXT, desc, FieldOptions(), today=date(2024, 6, 15))
        )
        assert html.index("<input") < html.index('<p class="inline-errors">')
        assert "has already been taken" in html

    def test_render_without_errors(self, dispatcher) -> None:
        html = str(
            dispatcher.render(
                ControlKind.TEXT, _desc("email", errors=[]), FieldOptions(), today=date.today()
            )
        )
        assert "inline-errors" not in html

    def test_render_temporal(self, dispatcher) -> None:
        html = str(
            dispatcher.render(
                ControlKind.DATE,
                _desc("birthday", date(2024, 3, 5)),
                FieldOptions(),
                today=date(2024, 6, 15),
            )
        )
        assert 'id="contact_birthday_year"' in html
        assert 'name="contact[birthday][month]"' in html
        assert '<option value="3" selected="selected">March</option>' in html


class TestSelectControls:
    def test_literal_select_marks_current_value(self, dispatcher) -> None:
        html = str(
            dispatcher.render_literal_select(
                _desc("color", 2), [(1, "Red"), (2, "Black")], FieldOptions()
            )
        )
        assert '<option value="1">Red</option>' in html
        assert '<option value="2" selected="selected">Black</option>' in html
        assert html.index("Red") < html.index("Black")

    def test_literal_select_bare_values(self, dispatcher) -> None:
        html = str(
            dispatcher.render_literal_select(
                _desc("size", "large"), ["small", "large"], FieldOptions()
            )
        )
        assert '<option value="small">small</option>' in html
        assert '<option value="large" selected="selected">large</option>' in html

    def test_prompt_option(self, dispatcher) -> None:
        html = str(
            dispatcher.render_literal_select(
                _desc("color"), [(1, "Red")], FieldOptions(prompt="Pick one")
            )
        )
        assert '<option value="">Pick one</option>' in html
        assert "selected" not in html

    def test_collection_select(self, dispatcher) -> None:
        items = [{"id": 1, "name": "Business"}, {"id": 2, "name": "Personal"}]
        html = str(
            dispatcher.render_collection_select(
                _desc("category_id", 2), items, FieldOptions(), lambda r: r["id"]
            )
        )
        assert '<select id="contact_category_id" name="contact[category_id]"' in html
        assert '<option value="2" selected="selected">Personal</option>' in html

    def test_collection_select_label_fields(self, dispatcher) -> None:
        items = [{"id": 1, "first": "Ada", "last": "Lovelace"}]
        html = str(
            dispatcher.render_collection_select(
                _desc("owner_id"), items, FieldOptions(fields=("first", "last")), lambda r: r["id"]
            )
        )
        assert ">Ada Lovelace</option>" in html

    def test_select_errors(self, dispatcher) -> None:
        html = str(
            dispatcher.render_literal_select(
                _desc("color", errors=["invalid"]), [(1, "Red")], FieldOptions()
            )
        )
        assert '<p class="inline-errors">has to be valid</p>' in html


class TestManyControls:
    GROUPS = [{"id": 1, "name": "Friends"}, {"id": 2, "name": "Family"}]

    def _many_desc(self) -> ControlDescriptor:
        return ControlDescriptor(id="contact_group_ids", name="contact[group_ids][]")

    def test_multi_select(self, dispatcher) -> None:
        html = str(
            dispatcher.render_many(
                self._many_desc(), self.GROUPS, FieldOptions(), lambda r: r["id"], [2]
            )
        )
        assert '<input name="contact[group_ids][]" type="hidden" value="">' in html
        assert 'multiple="multiple"' in html
        assert '<option value="1">Friends</option>' in html
        assert '<option value="2" selected="selected">Family</option>' in html

    def test_check_boxes_named_per_identity(self, dispatcher) -> None:
        html = str(
            dispatcher.render_many(
                self._many_desc(),
                self.GROUPS,
                FieldOptions(as_="check_boxes"),
                lambda r: r["id"],
                [1],
            )
        )
        assert (
            '<input type="checkbox" id="contact_group_ids_1" name="contact[group_ids][1]"'
            ' value="1" checked="checked"> Friends'
        ) in html
        assert 'name="contact[group_ids][2]" value="2">' in html

    def test_radio_buttons_share_name(self, dispatcher) -> None:
        html = str(
            dispatcher.render_many(
                self._many_desc(), self.GROUPS, FieldOptions(as_="radio"), lambda r: r["id"], []
            )
        )
        assert html.count('type="radio"') == 2
        assert html.count('name="contact[group_ids][]"') == 3
        assert "checked" not in html

    @pytest.mark.parametrize("style", [None, "check_boxes", "radio"])
    def test_literal_pairs(self, dispatcher, style) -> None:
        html = str(
            dispatcher.render_many(
                self._many_desc(),
                [(1, "Red"), (2, "Black")],
                FieldOptions(as_=style),
                lambda r: r["id"],
                [2],
            )
        )
        assert "None" not in html
        assert 'value="1"' in html
        assert 'value="2"' in html
        assert "Red" in html
        assert "Black" in html
        if style is None:
            assert '<option value="2" selected="selected">Black</option>' in html
        else:
            assert 'id="contact_group_ids_1"' in html
            assert 'value="2" checked="checked"> Black' in html

    @pytest.mark.parametrize("style", [None, "check_boxes", "radio"])
    def test_bare_values(self, dispatcher, style) -> None:
        html = str(
            dispatcher.render_many(
                self._many_desc(),
                ["small", "large"],
                FieldOptions(as_=style),
                lambda r: r["id"],
                ["small"],
            )
        )
        assert "None" not in html
        if style is None:
            assert '<option value="small" selected="selected">small</option>' in html
            assert '<option value="large">large</option>' in html
        else:
            assert 'id="contact_group_ids_large"' in html
            assert 'value="small" checked="checked"> small' in html
