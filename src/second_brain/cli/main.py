"""Main CLI entry point"""

from pathlib import Path

import click
from dotenv import load_dotenv

# Load .env file from current working directory before importing anything else
# This ensures environment variables are set before pydantic-settings reads them
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


@click.group()
@click.version_option(version='0.1.0', prog_name='second-brain-admin')
def cli():
    """Second Brain Admin CLI - Pattern observer and provider commands"""
    pass


def setup_cli():
    """Register all CLI commands"""
    from .patterns_cmd import insights, run_analysis, status, timeline
    from .providers_cmd import providers

    cli.add_command(run_analysis, name='run-analysis')
    cli.add_command(status, name='status')
    cli.add_command(insights, name='insights')
    cli.add_command(timeline, name='timeline')
    cli.add_command(providers, name='providers')


# Setup commands when module is imported
setup_cli()
