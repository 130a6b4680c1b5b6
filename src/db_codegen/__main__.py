"""
Main entry point for the code generator CLI
"""
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from dotenv import load_dotenv

from db_codegen.core.errors import DbCodegenError
from db_codegen.core.workspace import Workspace
from db_codegen.handlers.generator import Generator
from db_codegen.handlers.schema_fetcher import pull as pull_snapshot
from db_codegen.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_workspace(ctx: click.Context) -> Workspace:
    try:
        workspace = Workspace.discover()
    except (DbCodegenError, FileNotFoundError) as e:
        _fail(str(e))

    logging_config = workspace.config.logging.model_dump()
    if ctx.obj.get('log_level'):
        logging_config['level'] = ctx.obj['log_level']
    setup_logging(logging_config)
    return workspace


def _pull(workspace: Workspace) -> None:
    try:
        database = pull_snapshot(workspace)
    except DbCodegenError as e:
        _fail(f"Failed to pull database: {e}")

    click.echo(
        f"Successfully pulled {len(database.tables)} tables into {workspace.snapshot_path}"
    )


@click.group()
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Override the log level from the config file.')
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Generate source files from a database schema and Jinja2 templates."""
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level


@cli.command()
@click.argument('path', required=False, type=click.Path(file_okay=False, path_type=Path))
def init(path: Optional[Path]) -> None:
    """Create a workspace in PATH (the current directory by default)."""
    created = Workspace.init(path)
    for item in created:
        click.echo(f"Created {item}")
    if not created:
        click.echo("Workspace is already set up")


@cli.command()
@click.pass_context
def pull(ctx: click.Context) -> None:
    """Fetch the database schema and save the snapshot."""
    workspace = _load_workspace(ctx)
    _pull(workspace)


@cli.command()
@click.argument('template', required=False)
@click.option('--pull', '-p', 'should_pull', is_flag=True, default=False,
              help='Pull the database schema before generating.')
@click.pass_context
def generate(ctx: click.Context, template: Optional[str], should_pull: bool) -> None:
    """Render all templates, or only TEMPLATE."""
    workspace = _load_workspace(ctx)

    if should_pull:
        _pull(workspace)

    try:
        report = Generator(workspace).generate(template)
    except DbCodegenError as e:
        _fail(f"Failed to generate: {e}")

    for path in report.generated:
        click.echo(f"Generated {path}")
    for failure in report.failures:
        click.echo(f"Failed {failure.describe()}", err=True)

    count = report.success_count
    click.echo(f"Generated {count} file{'s' if count != 1 else ''}")

    if not report.ok:
        sys.exit(1)


def main():
    """Main function"""
    load_dotenv()
    cli(obj={})


if __name__ == '__main__':
    main()
