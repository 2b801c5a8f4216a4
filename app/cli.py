"""Flask CLI commands.

Usage:
    flask --app app workflows resume
"""

import click
from flask.cli import AppGroup

from app.services.workflow_engine import create_engine

workflows_cli = AppGroup("workflows", help="Durable workflow maintenance.")


@workflows_cli.command("resume")
def resume_due_runs():
    """Resume sleeping workflow runs whose wake-up time has passed."""
    resumed = create_engine().resume_due()
    click.echo(f"Resumed {resumed} workflow run(s).")
