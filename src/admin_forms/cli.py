"""
admin-forms command line.

``admin-forms render FORM_FILE``  Render a TOML form file to HTML.
``admin-forms version``           Show the installed version.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from admin_forms._version import __version__
from admin_forms.converters.description_loader import load_form_file
from admin_forms.converters.form_builder import build_form_tree, default_form_tree
from admin_forms.core.errors import FormError
from admin_forms.runtime.config import load_forms_config
from admin_forms.runtime.form_renderer import render_form

app = typer.Typer(
    help="Declarative admin forms: compile and render form descriptions.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(name="render")
def render_command(
    form_file: Path = typer.Argument(..., help="TOML form file (schema, form, record, errors)"),
    config: Path = typer.Option(
        Path("admin_forms.toml"),
        "--config",
        "-c",
        help="Forms configuration file",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the markup here instead of stdout",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Render a form file to HTML, followed by its behaviour script."""
    _configure_logging(verbose)

    if not form_file.is_file():
        typer.echo(f"Form file not found: {form_file}", err=True)
        raise typer.Exit(code=1)

    try:
        forms_config = load_forms_config(config)
        loaded = load_form_file(form_file)
        schema = loaded.build_schema()
        if loaded.declarations is None:
            tree = default_form_tree(
                schema,
                loaded.resource,
                related_loader=loaded.related_records,
                excluded=forms_config.excluded_fields,
            )
        else:
            tree = build_form_tree(loaded.declarations, loaded.resource)
        rendered = render_form(
            tree,
            loaded.build_context(),
            adapter=schema,
            config=forms_config,
        )
    except FormError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    html = str(rendered.markup)
    if rendered.script:
        html += f'\n<script type="text/javascript">\n{rendered.script}\n</script>'

    if output is not None:
        output.write_text(html + "\n")
        typer.echo(f"Wrote {output}")
    else:
        typer.echo(html)


@app.command(name="version")
def version_command() -> None:
    """Show the installed admin-forms version."""
    typer.echo(f"admin-forms {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
