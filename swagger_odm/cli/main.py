"""swagger-odm Command Line Interface."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from swagger_odm import __version__
from swagger_odm.compiler.session import CompilationSession
from swagger_odm.core.config import SwaggerODMConfig, load_config
from swagger_odm.core.exceptions import SwaggerODMError
from swagger_odm.document.loader import (
    load_document,
    load_extra_definitions,
    save_compiled,
    to_serializable,
)

console = Console()


def _session(ctx: click.Context, document: str) -> CompilationSession:
    config: SwaggerODMConfig = ctx.obj["config"]
    if config.compiler.validators_base_dir is None:
        # Validator paths in a document are relative to the document itself
        config = config.model_copy(deep=True)
        config.compiler.validators_base_dir = str(Path(document).resolve().parent)
    return CompilationSession(config=config)


def _load_inputs(document: str, extra: Optional[str]):
    swagger = load_document(document)
    extra_definitions = load_extra_definitions(extra) if extra else None
    return swagger, extra_definitions


@click.group()
@click.version_option(version=__version__, prog_name="swagger-odm")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """
    swagger-odm CLI.

    Compile the definitions of a Swagger document into document-database
    schemas.
    """
    ctx.ensure_object(dict)
    settings = load_config(config)
    ctx.obj["config"] = settings
    logging.basicConfig(
        level=log_level or settings.log_level.value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("compile")
@click.argument("document", type=click.Path(exists=True))
@click.option("--extra", "-e", type=click.Path(exists=True), help="Extra definitions file")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(), help="Write compiled schemas to a file")
@click.pass_context
def compile_command(
    ctx: click.Context,
    document: str,
    extra: Optional[str],
    output_format: str,
    output: Optional[str],
) -> None:
    """Compile a Swagger document and register its models."""
    try:
        swagger, extra_definitions = _load_inputs(document, extra)
        session = _session(ctx, document)
        result = session.compile(swagger, extra_definitions)
    except SwaggerODMError as e:
        console.print(f"[red]Compilation failed:[/red] {e}")
        sys.exit(1)

    if output:
        save_compiled(result.schemas, output)
        console.print(f"[green]Wrote {len(result.schemas)} schemas to {output}[/green]")

    if output_format == "json":
        data = {
            name: to_serializable(schema.definition)
            for name, schema in result.schemas.items()
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not result.schemas:
        console.print("[yellow]No schemas compiled[/yellow]")
        return

    table = Table(title="Compiled Schemas")
    table.add_column("Schema")
    table.add_column("Fields")
    table.add_column("Options", style="dim")
    table.add_column("Indexes")

    for name, schema in result.schemas.items():
        indexes = ", ".join(
            json.dumps(index.fields) + (" unique" if index.unique else "")
            for index in schema.indexes
        )
        table.add_row(
            name,
            ", ".join(schema.field_names),
            json.dumps(to_serializable(schema.options)) if schema.options else "",
            indexes,
        )

    console.print(table)
    console.print(f"[green]Registered models:[/green] {', '.join(result.models)}")


@cli.command()
@click.argument("document", type=click.Path(exists=True))
@click.argument("definition")
@click.option("--extra", "-e", type=click.Path(exists=True), help="Extra definitions file")
@click.pass_context
def inspect(
    ctx: click.Context,
    document: str,
    definition: str,
    extra: Optional[str],
) -> None:
    """Show the compiled property map of one definition."""
    try:
        swagger, extra_definitions = _load_inputs(document, extra)
        compiled = _session(ctx, document).compile_definitions(swagger, extra_definitions)
    except SwaggerODMError as e:
        console.print(f"[red]Compilation failed:[/red] {e}")
        sys.exit(1)

    if definition not in compiled:
        console.print(f"[red]Definition not compiled: {definition}[/red]")
        sys.exit(1)

    result = compiled[definition]
    console.print(f"[bold]Definition: {definition}[/bold]")
    console.print(f"  Options: {json.dumps(to_serializable(result.options))}")
    if result.index:
        console.print(f"  Index: {result.index.fields} (unique={result.index.unique})")
    console.print(json.dumps(to_serializable(result.properties), indent=2))


@cli.command("init-config")
@click.option(
    "--path",
    "-p",
    type=click.Path(),
    default="swagger-odm.yaml",
    help="Where to write the configuration",
)
def init_config(path: str) -> None:
    """Write a default configuration file."""
    config_path = Path(path)
    SwaggerODMConfig().to_yaml(config_path)
    console.print(f"[green]Configuration written to {config_path}[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
