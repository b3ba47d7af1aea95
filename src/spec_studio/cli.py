"""CLI entry point for spec-studio."""

import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from spec_studio.editor.commands import parse_commands
from spec_studio.editor.session import Editor
from spec_studio.editor.state import EditorState
from spec_studio.editor.store import FileSnapshotStore
from spec_studio.errors import SpecStudioError
from spec_studio.export import write_spec
from spec_studio.generator.scaffold import DEFAULT_PORT, DEFAULT_SERVER_NAME, ScaffoldOptions, generate_scaffold
from spec_studio.parser.detect import detect_format
from spec_studio.parser.loader import load_spec

DEFAULT_STORE_DIR = ".spec-studio"

store_option = click.option(
    "--store",
    "store_dir",
    default=DEFAULT_STORE_DIR,
    envvar="SPEC_STUDIO_STORE",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the saved snapshot.",
)


def _load(spec_path: Path) -> dict:
    try:
        return load_spec(spec_path)
    except SpecStudioError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Spec Studio: edit OpenAPI documents and generate MCP servers from them."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("import")
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file (.json, .yaml or .yml).")
def import_(spec_path: Path, output: Path):
    """Import an OpenAPI 3.x or Swagger 2.0 document and write it as OpenAPI 3."""
    click.echo(f"Reading {spec_path} (format: {detect_format(spec_path)})...")
    doc = _load(spec_path)
    write_spec(doc, output)
    click.echo(f"Specification saved to {output}")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("commands_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file (.json, .yaml or .yml).")
def apply(spec_path: Path, commands_path: Path, output: Path):
    """Apply a YAML or JSON list of editing commands to a document."""
    doc = _load(spec_path)
    try:
        data = yaml.safe_load(commands_path.read_text(encoding="utf-8"))
        commands = parse_commands(data if data is not None else [])
    except (yaml.YAMLError, ValidationError) as e:
        raise click.ClickException(f"Invalid command file {commands_path}: {e}") from e
    click.echo(f"Applying {len(commands)} commands...")

    editor = Editor(EditorState(document=doc))
    editor.dispatch_all(commands)

    write_spec(editor.document, output)
    click.echo(f"Specification saved to {output}")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for the generated server.")
@click.option("--name", "server_name", default=DEFAULT_SERVER_NAME, show_default=True, help="Name of the generated server.")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="Default port of the generated server.")
@click.option("--base-url", default=None, envvar="SPEC_STUDIO_BASE_URL", help="API base URL, overriding the document's first server.")
def generate(spec_path: Path, output: Path, server_name: str, port: int, base_url: str | None):
    """Generate an MCP server project from a document."""
    doc = _load(spec_path)

    click.echo("Generating server...")
    options = ScaffoldOptions(server_name=server_name, port=port, base_url=base_url)
    files = generate_scaffold(doc, options)

    output.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} files in {output}")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@store_option
def save(spec_path: Path, store_dir: Path):
    """Save a document as the rollback snapshot."""
    doc = _load(spec_path)
    editor = Editor(EditorState(document=doc), FileSnapshotStore(store_dir))
    try:
        editor.save()
    except SpecStudioError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Snapshot saved to {store_dir}")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file (.json, .yaml or .yml).")
@store_option
def undo(output: Path, store_dir: Path):
    """Restore the saved snapshot into a file."""
    store = FileSnapshotStore(store_dir)
    if store.read() is None:
        raise click.ClickException(f"No saved snapshot in {store_dir}")

    editor = Editor(store=store)
    editor.undo()
    write_spec(editor.document, output)
    click.echo(f"Snapshot restored to {output}")
