"""CLI main entry point."""

import json
import logging
from pathlib import Path
from typing import Any

import click

from .client import AppConfigClient
from .config import Settings
from .consts import LOG_FILE_DEFAULT, SETTINGS_FILE_DEFAULT
from .document import ConfigDocument
from .enums import FieldType
from .errors import AppFormException
from .form import FormSession
from .log import setup as setup_log
from .path import MISSING
from .schema import SchemaField, icon_name, load_schema
from .utils import atomic_write

logger = logging.getLogger(__name__)


def load_settings(config_path: str) -> Settings:
    """Load settings from file when it exists, otherwise from the environment."""
    if Path(config_path).is_file():
        logger.debug(f"Loading settings file: {config_path}")
        return Settings.load_from_file(config_path)
    return Settings.from_env()


def parse_cli_value(raw: str) -> Any:
    """Parse a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def render_form(session: FormSession) -> list[str]:
    """Plain-text rendering of the visible form, one control per line."""
    lines = []
    for visible in session.visible_sections():
        icon = f" ({icon_name(visible.section.icon)})" if visible.section.icon else ""
        lines.append(f"== {visible.title}{icon}")
        for field in visible.fields:
            lines.extend(_render_field(session, field, depth=1))
    return lines


def _render_field(session: FormSession, field: SchemaField, depth: int) -> list[str]:
    indent = "  " * depth

    if field.type == FieldType.GROUP:
        lines = [f"{indent}{field.label}:"]
        for child in session.group_fields(field):
            lines.extend(_render_field(session, child, depth + 1))
        return lines

    if field.type in (FieldType.OBJECT_ARRAY, FieldType.TABS):
        items = session.items(field)
        lines = [f"{indent}{field.label} ({field.path}): {len(items)} item(s)"]
        if not items and field.empty_message:
            lines.append(f"{indent}  {field.empty_message}")
        for index in range(len(items)):
            lines.append(f"{indent}  [{index}] {session.item_title(field, index)}")
            for child in session.item_fields(field, index):
                lines.extend(_render_field(session, child, depth + 2))
        return lines

    value = json.dumps(session.value_of(field), ensure_ascii=False)
    suffix = f" {field.suffix}" if field.suffix else ""
    return [f"{indent}{field.label} ({field.path}) = {value}{suffix}"]


def _read_document(config_file: str) -> ConfigDocument:
    return ConfigDocument.from_json(Path(config_file).read_text(encoding="utf-8"))


@click.group()
@click.option("--config", "-c", default=SETTINGS_FILE_DEFAULT, help="Settings file path")
@click.option("--log-file", default=LOG_FILE_DEFAULT, help="Log file path")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages to the console")
@click.pass_context
def cli(ctx, config: str, log_file: str, verbose: bool):
    """appform - schema-driven editor for DNS server app configurations."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    setup_log(log_file, verbose=verbose)


@cli.command(name="show")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False), help="UI schema JSON file")
def show(config_file: str, schema_file: str | None):
    """Print the visible form for CONFIG_FILE with resolved values."""
    config_text = Path(config_file).read_text(encoding="utf-8")
    schema_text = Path(schema_file).read_text(encoding="utf-8") if schema_file else None

    session = FormSession.open(config_text, schema_text)
    if session.degraded:
        click.echo("Structured editing unavailable, showing raw configuration.", err=True)
        click.echo(config_text)
        return

    if not session.schema.sections:
        click.echo(session.to_json())
        return

    if session.schema.description:
        click.echo(session.schema.description)
    for line in render_form(session):
        click.echo(line)


@cli.command(name="get")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
def get(config_file: str, path: str):
    """Print the JSON value at PATH inside CONFIG_FILE."""
    try:
        document = _read_document(config_file)
    except AppFormException as e:
        raise click.ClickException(str(e))

    value = document.get(path)
    if value is MISSING:
        raise click.ClickException(f"No value at '{path}'")
    click.echo(json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False))


@cli.command(name="set")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
@click.argument("value")
@click.option("--in-place", "-i", is_flag=True, default=False, help="Rewrite CONFIG_FILE instead of printing")
def set_(config_file: str, path: str, value: str, in_place: bool):
    """Set PATH to VALUE (parsed as JSON, else taken as text)."""
    try:
        document = _read_document(config_file)
        document.set(path, parse_cli_value(value))
    except AppFormException as e:
        raise click.ClickException(str(e))

    if in_place:
        atomic_write(config_file, document.to_json() + "\n")
        logger.debug(f"Updated '{path}' in {config_file}")
    else:
        click.echo(document.to_json())


@cli.command(name="validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False), required=True)
@click.pass_context
def validate(ctx, config_file: str, schema_file: str):
    """Check CONFIG_FILE against the rules declared in a UI schema."""
    try:
        document = _read_document(config_file)
        schema = load_schema(Path(schema_file).read_text(encoding="utf-8"))
    except AppFormException as e:
        raise click.ClickException(str(e))

    issues = FormSession(schema, document).validate()
    if not issues:
        click.echo("Configuration is valid")
        return

    for issue in issues:
        click.echo(f"  - {issue}")
    ctx.exit(1)


@cli.command(name="pull")
@click.argument("app_name")
@click.option("--node", default=None, help="Cluster node to query")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write to file")
@click.pass_context
def pull(ctx, app_name: str, node: str | None, output: str | None):
    """Download the configuration of APP_NAME from the DNS server."""
    try:
        settings = load_settings(ctx.obj["config_path"])
        config_text = AppConfigClient(settings.server).get_config(app_name, node=node)
    except AppFormException as e:
        logger.error(f"Pull failed: {e}")
        raise click.ClickException(str(e))

    if output:
        atomic_write(output, config_text)
    else:
        click.echo(config_text)


@cli.command(name="push")
@click.argument("app_name")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--node", default=None, help="Cluster node to update")
@click.pass_context
def push(ctx, app_name: str, config_file: str, node: str | None):
    """Upload CONFIG_FILE as the configuration of APP_NAME."""
    try:
        document = _read_document(config_file)
        settings = load_settings(ctx.obj["config_path"])
        AppConfigClient(settings.server).set_config(app_name, document.to_json(), node=node)
    except AppFormException as e:
        logger.error(f"Push failed: {e}")
        raise click.ClickException(str(e))

    click.echo(f"Configuration of '{app_name}' saved")


@cli.command(name="schema")
@click.argument("url")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write to file")
@click.pass_context
def schema(ctx, url: str, output: str | None):
    """Download and check the UI schema at URL."""
    try:
        settings = load_settings(ctx.obj["config_path"])
        schema_text = AppConfigClient(settings.server).fetch_schema(url)
        ui_schema = load_schema(schema_text)
    except AppFormException as e:
        raise click.ClickException(str(e))

    if output:
        atomic_write(output, schema_text)
        click.echo(f"Schema with {len(ui_schema.sections)} section(s) written to {output}")
    else:
        click.echo(schema_text)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
