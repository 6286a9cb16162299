# backend/cli.py
import click
from flask.cli import with_appcontext

from backend.services.reference_service import ReferenceService


@click.command("seed-reference")
@with_appcontext
def seed_reference_command():
    """Load districts, crop types and livestock breeds."""
    click.echo("🌱 Seeding reference data...")
    counts = ReferenceService.seed()
    for name, n in counts.items():
        click.echo(f"✅ {name}: {n}")


def register_cli(app):
    app.cli.add_command(seed_reference_command)
