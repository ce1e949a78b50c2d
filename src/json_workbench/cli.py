"""Command-line interface for the JSON Workbench."""

import asyncio
import json
import logging
import sys
import click
from pathlib import Path
from typing import Optional
from .history_store import HistoryStore
from .schema_inferrer import SchemaInferrer
from .io.share_codec import ShareCodec, SHARE_LEGACY_MARKER
from .io.yaml_writer import YamlWriter
from .parser import JSONParser
from .types import DEFAULT_ROOT_NAME, DEFAULT_TRANSFORM_SCRIPT
from .utils.shape_utils import ShapeUtils

DEFAULT_BASE_URL = "http://localhost:3000/"


def _read_input(input_file: Path) -> str:
    return input_file.read_text(encoding='utf-8')


def _load_json(input_file: Path):
    data, error = JSONParser().try_parse(_read_input(input_file))
    if error is not None:
        click.echo(f"❌ {input_file}: {error}", err=True)
        sys.exit(1)
    return data


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def main(verbose: bool):
    """JSON Workbench - transform JSON with Python and inspect the result."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--script', '-s', 'script_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='File holding the transform body')
@click.option('--code', '-c', help='Transform body given inline')
@click.option('--format', '-f', 'output_format', type=click.Choice(['json', 'yaml', 'schema']),
              default='json', help='Output format (default: json)')
@click.option('--root-name', '-r', default=DEFAULT_ROOT_NAME, help='Schema title (default: Root)')
def run(input_file: Path, script_file: Optional[Path], code: Optional[str],
        output_format: str, root_name: str):
    """Run a transform against a JSON file and print the result."""
    if script_file is not None:
        script = script_file.read_text(encoding='utf-8')
    elif code is not None:
        script = code
    else:
        script = DEFAULT_TRANSFORM_SCRIPT

    store = HistoryStore(json_input=_read_input(input_file), transform_script=script, root_name=root_name)
    if store.state.json_parse_error:
        click.echo(f"❌ {input_file}: {store.state.json_parse_error}", err=True)
        sys.exit(1)

    result = store.execute_transform()

    for entry in store.state.console_logs:
        rendered = " ".join(a if isinstance(a, str) else json.dumps(a, default=str) for a in entry.args)
        click.echo(f"[{entry.level.value}] {rendered}", err=True)

    if result is None or not result.success:
        click.echo(f"❌ Transform failed: {store.state.transform_error}", err=True)
        sys.exit(1)

    transformed = store.state.transformed_json
    if output_format == 'yaml':
        click.echo(YamlWriter().dumps(transformed))
    elif output_format == 'schema':
        click.echo(SchemaInferrer().to_json_schema_text(transformed, store.state.root_name))
    else:
        click.echo(store.transformed_as_text())


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--root-name', '-r', default=DEFAULT_ROOT_NAME, help='Schema title (default: Root)')
def schema(input_file: Path, root_name: str):
    """Infer a JSON Schema (draft-07) for a JSON file."""
    click.echo(SchemaInferrer().to_json_schema_text(_load_json(input_file), root_name))


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def yaml(input_file: Path):
    """Print a JSON file as YAML."""
    click.echo(YamlWriter().dumps(_load_json(input_file)))


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(input_file: Path):
    """Summarise the structure and arrays of a JSON file."""
    data = _load_json(input_file)
    stats = JSONParser().get_structure_statistics(data)

    click.echo(f"📊 {stats['size_bytes']} bytes, depth {stats['depth']}, "
               f"{stats['objects']} objects, {stats['arrays']} arrays, "
               f"{stats['scalars']} scalars")

    array_paths = ShapeUtils.find_array_paths(data)
    if not array_paths:
        click.echo("No arrays found")
        return
    for array_path in array_paths:
        _, columns = ShapeUtils.tabulate(data, array_path.path)
        suffix = f" columns: {', '.join(columns)}" if columns else ""
        click.echo(f"   • {array_path.label} ({array_path.length}){suffix}")


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--script', '-s', 'script_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='File holding the transform body')
@click.option('--root-name', '-r', default=DEFAULT_ROOT_NAME, help='Root name to carry along')
@click.option('--base-url', '-b', default=DEFAULT_BASE_URL, help='Page URL the fragment is attached to')
@click.option('--legacy', is_flag=True, help='Emit an uncompressed #share= link')
def share(input_file: Path, script_file: Optional[Path], root_name: str, base_url: str, legacy: bool):
    """Create a share link for a JSON file and transform."""
    json_input = _read_input(input_file)
    script = script_file.read_text(encoding='utf-8') if script_file else DEFAULT_TRANSFORM_SCRIPT

    store = HistoryStore(json_input=json_input, transform_script=script, root_name=root_name)
    if store.state.json_parse_error:
        click.echo(f"❌ {input_file}: {store.state.json_parse_error}", err=True)
        sys.exit(1)

    codec = ShareCodec()
    if legacy:
        click.echo(f"{base_url.split('#', 1)[0]}{SHARE_LEGACY_MARKER}{codec.encode_legacy(store.snapshot())}")
    else:
        token = asyncio.run(codec.encode(store.snapshot()))
        click.echo(codec.build_share_url(base_url, token))


@main.command(name='open-share')
@click.argument('link')
def open_share(link: str):
    """Decode a share link or fragment and print its contents."""
    store = HistoryStore()
    loaded = asyncio.run(ShareCodec().hydrate(store, link))
    if not loaded:
        click.echo("❌ No share data found in link", err=True)
        sys.exit(1)

    click.echo(json.dumps({
        "jsonInput": store.state.json_input,
        "transformScript": store.state.transform_script,
        "rootName": store.state.root_name,
    }, indent=2, ensure_ascii=False))


if __name__ == '__main__':
    main()
