"""Command-line interface for the Content Visualizer."""

import asyncio
import json
import logging
import click
from typing import Optional
from . import __version__
from .inspector import ContentInspector
from .models import render_table
from .types import FormatKind, ViewType, ProcessingError, ErrorType


KIND_CHOICE = click.Choice([kind.value for kind in FormatKind], case_sensitive=False)
COMPRESSED_KINDS = (FormatKind.GZIP, FormatKind.DEFLATE)

kind_option = click.option(
    '--kind', '-k', type=KIND_CHOICE, default=None,
    help='Treat the content as this format instead of detecting it'
)
input_argument = click.argument('input_file', type=click.File('r', encoding='utf-8'), default='-')


def _read(input_file) -> str:
    return input_file.read()


def _resolve_kind(inspector: ContentInspector, text: str, kind_name: Optional[str]) -> Optional[FormatKind]:
    if kind_name:
        return FormatKind.parse(kind_name)
    return inspector.classify(text)


def _require_kind(inspector: ContentInspector, text: str, kind_name: Optional[str]) -> FormatKind:
    kind = _resolve_kind(inspector, text, kind_name)
    if kind is None:
        raise click.UsageError("Could not detect the content format; pass --kind")
    return kind


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--profile', 'enable_profiling', is_flag=True, help='Print timing and memory usage on exit')
@click.option('--bytes-per-line', default=16, show_default=True, help='Bytes per hex dump line')
@click.option('--indent', default=2, show_default=True, help='Indentation for formatted JSON and XML')
@click.pass_context
def main(ctx: click.Context, verbose: bool, enable_profiling: bool, bytes_per_line: int, indent: int):
    """Content Visualizer - Detect, decode and pretty-print text content."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        inspector = ContentInspector(
            enable_profiling=enable_profiling,
            bytes_per_line=bytes_per_line,
            json_indent=indent
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--bytes-per-line")

    ctx.obj = inspector

    def finish():
        if inspector.profiler is not None:
            click.echo(inspector.profiler.export_metrics("summary"), err=True)
        inspector.close()

    ctx.call_on_close(finish)


@main.command()
@input_argument
@click.option('--all', 'show_all', is_flag=True, help='List every matching format, most specific first')
@click.pass_obj
def detect(inspector: ContentInspector, input_file, show_all: bool):
    """Detect the format of the content."""
    text = _read(input_file)

    if show_all:
        kinds = inspector.matching_formats(text)
        if not kinds:
            click.echo("unknown")
        for kind in kinds:
            click.echo(kind.value)
        return

    kind = inspector.classify(text)
    click.echo(kind.value if kind else "unknown")
    if kind is not None and inspector.is_base64_image(text) and kind != FormatKind.BASE64_IMAGE:
        click.echo(f"(also looks like a {FormatKind.BASE64_IMAGE.value})")


@main.command(name='format')
@input_argument
@kind_option
@click.option('--minify', is_flag=True, help='Minify JSON instead of pretty-printing it')
@click.pass_obj
def format_command(inspector: ContentInspector, input_file, kind: Optional[str], minify: bool):
    """Pretty-print the content."""
    text = _read(input_file)

    if minify:
        click.echo(inspector.minify(text))
        return

    resolved = _resolve_kind(inspector, text, kind)
    click.echo(inspector.format(text, resolved) if resolved else text)


@main.command()
@input_argument
@kind_option
@click.pass_obj
def decode(inspector: ContentInspector, input_file, kind: Optional[str]):
    """Decode encoded content (base64, URL, HTML entities, gzip, JWT...)."""
    text = _read(input_file)
    resolved = _require_kind(inspector, text, kind)

    if not inspector.codec_engine.supports_decode(resolved):
        raise click.UsageError(f"No decoder for {resolved.value}")

    result = inspector.codec_engine.try_decode(text, resolved)
    if not result.success:
        error_type = ErrorType.COMPRESSION if resolved in COMPRESSED_KINDS else ErrorType.ENCODING
        response = inspector.error_handler.handle_processing_error(ProcessingError(
            '; '.join(result.errors or []), error_type, context={"kind": resolved.value}
        ))
        click.echo(f"❌ Could not decode as {resolved.value}: {'; '.join(result.errors or [])}", err=True)
        click.echo(f"   {response.suggested_action}", err=True)
    click.echo(result.value)


@main.command()
@input_argument
@click.option('--kind', '-k', type=KIND_CHOICE, required=True, help='Encoding to apply')
@click.pass_obj
def encode(inspector: ContentInspector, input_file, kind: str):
    """Encode content (base64, URL, HTML entities, hex, gzip, deflate)."""
    text = _read(input_file)
    resolved = FormatKind.parse(kind)

    if not inspector.codec_engine.supports_encode(resolved):
        raise click.UsageError(f"No encoder for {resolved.value}")

    click.echo(inspector.encode(text, resolved))


@main.command()
@input_argument
@kind_option
@click.option('--json', 'as_json', is_flag=True, help='Print the tree as JSON')
@click.pass_obj
def tree(inspector: ContentInspector, input_file, kind: Optional[str], as_json: bool):
    """Show nested content (JSON, XML, YAML, TOML) as a tree."""
    text = _read(input_file)
    resolved = _require_kind(inspector, text, kind)
    root = inspector.to_tree(text, resolved)

    if as_json:
        click.echo(json.dumps(root.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(root.render())


@main.command()
@input_argument
@kind_option
@click.option('--json', 'as_json', is_flag=True, help='Print the rows as JSON')
@click.pass_obj
def table(inspector: ContentInspector, input_file, kind: Optional[str], as_json: bool):
    """Show flat content (CSV, INI, JWT, URI, cron...) as a table."""
    text = _read(input_file)
    resolved = _require_kind(inspector, text, kind)
    rows = inspector.to_rows(text, resolved)

    if as_json:
        click.echo(json.dumps([row.to_dict() for row in rows], indent=2, ensure_ascii=False))
    else:
        click.echo(render_table(rows))


@main.command()
@input_argument
@kind_option
@click.pass_obj
def hexdump(inspector: ContentInspector, input_file, kind: Optional[str]):
    """Show a hex dump of the content (decoded bytes for base64 and hex strings)."""
    text = _read(input_file)
    resolved = FormatKind.parse(kind) if kind else None
    click.echo(inspector.to_hex_dump(text, resolved))


@main.command()
@input_argument
@click.pass_obj
def stats(inspector: ContentInspector, input_file):
    """Count lines, characters and bytes."""
    click.echo(inspector.statistics(_read(input_file)).summary())


@main.command()
@input_argument
@kind_option
@click.option('--view', type=click.Choice([view.value for view in ViewType]), default=None,
              help='View to print (defaults to the format\'s default view)')
@click.pass_obj
def inspect(inspector: ContentInspector, input_file, kind: Optional[str], view: Optional[str]):
    """Detect the format, show the available views and print one of them."""
    text = _read(input_file)
    resolved = FormatKind.parse(kind) if kind else None
    result = asyncio.run(inspector.inspect(text, resolved))

    click.echo(f"📄 {result.profile.title}" + (f" ({result.kind.value})" if result.kind else ""))
    click.echo(f"📊 {result.statistics.summary()}")
    click.echo("👁  Views: " + ", ".join(
        f"{v.value}*" if v == result.profile.default_view else v.value
        for v in result.profile.supported_views
    ))
    for warning in result.warnings:
        click.echo(f"⚠️  {warning}")
    click.echo("")

    selected = ViewType(view) if view else result.profile.default_view
    if selected in (ViewType.FORMATTED, ViewType.SYNTAX_HIGHLIGHTED) and result.profile.supports(selected):
        click.echo(result.formatted)
        return

    try:
        output = inspector.render_view(text, result.kind, selected)
    except ProcessingError as e:
        response = inspector.error_handler.handle_processing_error(e)
        raise click.UsageError(f"{e}. {response.suggested_action}")

    if selected == ViewType.TREE:
        click.echo(output.render())
    elif selected in (ViewType.TABLE, ViewType.CLAIMS):
        click.echo(render_table(output))
    elif selected == ViewType.IMAGE:
        click.echo(output.summary() if output else "❌ Not a recognizable image")
    else:
        click.echo(output)


if __name__ == '__main__':
    main()
