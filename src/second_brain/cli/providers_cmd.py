"""Providers diagnostic command"""

import click

from second_brain.providers import plugin_loader


@click.command()
def providers():
    """List all discovered providers"""
    click.echo("Second Brain Provider Discovery\n")

    for provider_type in plugin_loader.PROVIDER_GROUPS:
        discovered = plugin_loader.get_providers(provider_type)
        click.echo(f"{provider_type.upper()} Providers ({len(discovered)}):")

        for name, cls in discovered.items():
            click.echo(f"  - {name:15} ({cls.__module__})")

        click.echo()

    total = sum(len(plugin_loader.get_providers(t)) for t in plugin_loader.PROVIDER_GROUPS)
    click.echo(f"Total: {total} providers discovered")
