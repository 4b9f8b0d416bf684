"""Unit tests for the Jinja2 theme."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import TemplateNotFound
from markupsafe import Markup

from admin_forms.runtime.template_renderer import (
    TEMPLATES_DIR,
    FormTheme,
    JinjaTheme,
    create_jinja_env,
)


class TestJinjaEnv:
    def test_templates_shipped(self) -> None:
        for name in ("form/form.html", "form/item.html", "controls/select.html"):
            assert (TEMPLATES_DIR / name).is_file()

    def test_autoescape(self) -> None:
        env = create_jinja_env()
        html = env.from_string("{{ value }}").render(value="<b>")
        assert html == "&lt;b&gt;"

    def test_filters(self) -> None:
        env = create_jinja_env()
        assert env.from_string("{{ 'unique'|error_message }}").render() == "has already been taken"
        assert env.from_string("{{ 'category_id'|humanize }}").render() == "Category"
        messages = env.from_string("{{ errors|error_messages|join('; ') }}").render(
            errors=["unique", ("too_short", 3)]
        )
        assert messages == "has already been taken; must be longer than 2"

    def test_project_override(self, tmp_path: Path) -> None:
        (tmp_path / "controls").mkdir()
        (tmp_path / "controls" / "errors.html").write_text(
            '<span class="err">{{ errors|length }}</span>'
        )
        theme = JinjaTheme(project_templates_dir=tmp_path)
        assert theme.render("controls/errors.html", errors=["a", "b"]) == (
            '<span class="err">2</span>'
        )

    def test_framework_prefix(self, tmp_path: Path) -> None:
        (tmp_path / "controls").mkdir()
        (tmp_path / "controls" / "errors.html").write_text(
            '<div class="wrap">{% include "af://controls/errors.html" %}</div>'
        )
        theme = JinjaTheme(project_templates_dir=tmp_path)
        html = theme.render("controls/errors.html", errors=["unique"])
        assert html.startswith('<div class="wrap"><p class="inline-errors">')
        assert "has already been taken" in html

    def test_missing_project_dir_falls_back(self, tmp_path: Path) -> None:
        theme = JinjaTheme(project_templates_dir=tmp_path / "nope")
        assert "inline-errors" in theme.render("controls/errors.html", errors=["x"])

    def test_unknown_template(self) -> None:
        with pytest.raises(TemplateNotFound):
            JinjaTheme().render("form/nope.html")


class TestJinjaTheme:
    def test_returns_markup(self) -> None:
        theme = JinjaTheme()
        html = theme.render("form/script.html", script=Markup("go();"))
        assert isinstance(html, Markup)
        assert "go();" in html

    def test_is_a_form_theme(self) -> None:
        assert isinstance(JinjaTheme(), FormTheme)
