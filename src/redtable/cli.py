"""
Command-line interface for redtable.
"""

import asyncio
import json
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ClusterConnection, LoggingConfig, RedtableConfig
from .exceptions import ConfigurationError, RedtableError
from .logging_setup import setup_logging


console = Console()


def handle_errors(func):
    """Decorator to handle errors gracefully in CLI commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RedtableError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            sys.exit(0)
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {e}")
            if "--debug" in sys.argv:
                import traceback
                traceback.print_exc()
            sys.exit(1)
    return wrapper


def _load_document(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON mapping from disk."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML/JSON in {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {path}")
    return data


def _configure_logging(ctx: click.Context, logging_config: Optional[LoggingConfig] = None):
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    if logging_config is None:
        logging_config = LoggingConfig(level="WARNING")
    setup_logging(logging_config, "DEBUG" if debug else None)


@click.group()
@click.version_option(__version__)
@click.option(
    "--debug", is_flag=True, help="Enable debug mode"
)
@click.pass_context
def main(ctx, debug):
    """redtable: Declarative Redshift table schema reconciliation."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="redtable-config.yaml",
    help="Output configuration file path",
)
@handle_errors
def init(output: str):
    """Initialize a new redtable configuration file."""
    if Path(output).exists():
        if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
            return

    config = _create_default_config()
    config.to_yaml(output)
    console.print(f"[green]✓[/green] Configuration file created: {output}")
    console.print("\n[yellow]Next steps:[/yellow]")
    console.print("1. Edit the configuration file with your cluster endpoints")
    console.print("2. Run: redtable validate-config -c your-config.yaml")
    console.print("3. Run: redtable handle event.json -c your-config.yaml")


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    required=True,
    help="Configuration file path",
)
@handle_errors
def validate_config(config: str):
    """Validate configuration file."""
    console.print(f"Validating configuration: {config}")

    try:
        redtable_config = RedtableConfig.from_yaml(config)
        redtable_config.validate_config()

        console.print("[green]✓[/green] Configuration is valid")
        _display_config_summary(redtable_config)

    except ConfigurationError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        sys.exit(1)


@main.command()
@click.argument("schema_file", type=click.Path(exists=True))
@click.option(
    "--request-id",
    default="",
    help="Request id used to derive the generated name suffix",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Also check dist/sort styles against key columns",
)
@click.pass_context
@handle_errors
def render(ctx, schema_file: str, request_id: str, strict: bool):
    """Print the CREATE TABLE statement for a schema file."""
    from .schema import TableSchema, build_create, validate_schema

    _configure_logging(ctx)

    schema = TableSchema.from_properties(_load_document(schema_file), request_id)
    validate_schema(schema, strict=strict)
    click.echo(build_create(schema))


@main.command()
@click.argument("old_file", type=click.Path(exists=True))
@click.argument("new_file", type=click.Path(exists=True))
@click.option(
    "--table",
    "-t",
    required=True,
    help="Physical name of the existing table",
)
@click.pass_context
@handle_errors
def plan(ctx, old_file: str, new_file: str, table: str):
    """Show how a table would move from OLD_FILE's schema to NEW_FILE's."""
    from .schema import Replace, TableSchema, diff

    _configure_logging(ctx)

    old = TableSchema.from_properties(_load_document(old_file))
    new = TableSchema.from_properties(_load_document(new_file))

    result = diff(table, old, new)
    if isinstance(result, Replace):
        console.print(f"[yellow]Replace[/yellow] table {table} ({result.reason.value})")
        return

    if result.is_empty:
        console.print(f"[green]✓[/green] Table {table} is up to date")
        return

    console.print(f"[blue]Alter[/blue] table {table} with {len(result.statements)} statement(s):")
    for statement in result.statements:
        click.echo(statement)


@main.command()
@click.argument("event_file", type=click.Path(exists=True))
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path (omit for a dry run)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print statements instead of executing them",
)
@click.pass_context
@handle_errors
def handle(ctx, event_file: str, config: Optional[str], dry_run: bool):
    """Handle a custom resource event stored in EVENT_FILE."""
    from .database import DatabaseManager, PoolStatementExecutor, RecordingExecutor
    from .lifecycle import LifecycleEvent, TableLifecycleHandler

    redtable_config = RedtableConfig.from_yaml(config) if config else RedtableConfig()
    _configure_logging(ctx, redtable_config.logging if config else None)

    dry_run = dry_run or redtable_config.dry_run or not config
    event = LifecycleEvent.from_request(_load_document(event_file))

    async def run_event():
        if dry_run:
            executor = RecordingExecutor()
            handler = TableLifecycleHandler(
                executor,
                validate_schemas=redtable_config.validation.enabled,
                strict_validation=redtable_config.validation.strict,
            )
            return await handler.handle(event)

        async with DatabaseManager(redtable_config.clusters) as manager:
            handler = TableLifecycleHandler(
                PoolStatementExecutor(manager),
                validate_schemas=redtable_config.validation.enabled,
                strict_validation=redtable_config.validation.strict,
            )
            return await handler.handle(event)

    result = asyncio.run(run_event())

    if dry_run:
        console.print("[yellow]Dry run - no statements were executed[/yellow]")
    console.print(f"[green]✓[/green] {event.kind.value}: {result.action.value}")
    for statement in result.statements:
        click.echo(statement)
    click.echo(json.dumps(result.to_response()))


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    required=True,
    help="Configuration file path",
)
@click.pass_context
@handle_errors
def test_connection(ctx, config: str):
    """Test connections to every configured cluster."""
    from .database import DatabaseManager
    from .schema import ClusterIdentity

    console.print("[blue]Testing connections...[/blue]")

    redtable_config = RedtableConfig.from_yaml(config)
    _configure_logging(ctx, redtable_config.logging)

    async def run_connection_tests():
        results = []
        async with DatabaseManager(redtable_config.clusters) as manager:
            for name, cluster in redtable_config.clusters.items():
                identity = ClusterIdentity(
                    cluster_name=name, database_name=cluster.default_database
                )
                results.append(await manager.test_connection(identity))
        return results

    results = asyncio.run(run_connection_tests())

    failed = 0
    for result in results:
        if result["status"] == "connected":
            console.print(f"  ✅ [green]{result['cluster']}[/green]: {result['version']}")
        else:
            console.print(f"  ❌ [red]{result['cluster']}[/red]: {result['error']}")
            failed += 1

    console.print(f"\n[bold]Connection Test Summary[/bold]")
    console.print(f"  Passed: [green]{len(results) - failed}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")

    if failed:
        sys.exit(1)


def _create_default_config() -> RedtableConfig:
    """Create a default configuration with examples."""
    return RedtableConfig(
        clusters={
            "analytics": ClusterConnection(
                host="${REDSHIFT_HOST}",
                user="${REDSHIFT_USER}",
                password="${REDSHIFT_PASSWORD}",
                default_database="dev",
            ),
        },
    )


def _display_config_summary(config: RedtableConfig):
    """Display a summary of the configuration."""
    console.print("\n[blue]Configuration Summary[/blue]")

    cluster_table = Table(title="Clusters")
    cluster_table.add_column("Name", style="cyan")
    cluster_table.add_column("Host", style="magenta")
    cluster_table.add_column("Port", style="green")
    cluster_table.add_column("Pool", style="yellow")

    for name, cluster in config.clusters.items():
        cluster_table.add_row(
            name,
            cluster.host,
            str(cluster.port),
            f"{cluster.min_size}-{cluster.max_size}",
        )

    console.print(cluster_table)
    console.print(
        f"Validation: {'on' if config.validation.enabled else 'off'}"
        f"{' (strict)' if config.validation.strict else ''}"
        f", dry run: {'on' if config.dry_run else 'off'}"
    )


if __name__ == "__main__":
    main()
