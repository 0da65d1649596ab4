import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from feedback_app.extensions import db
from feedback_app.services.storage import FileStore, active_store


@click.group()
def feedback():
    """Feedback storage helpers."""


@feedback.command("init-store")
@with_appcontext
def init_store():
    store = FileStore.from_app()
    store.ensure()
    click.echo(f"File store ready at {store.path}")
    try:
        db.create_all()
    except SQLAlchemyError as exc:
        raise click.ClickException(f"Database not reachable: {exc}")
    click.echo("Database tables ready")


@feedback.command("status")
@with_appcontext
def status():
    store = active_store()
    click.echo(f"Active store: {store.name}")
    if store.name == FileStore.name:
        click.echo(f"File: {current_app.config['FEEDBACK_DATA_DIR']}/{current_app.config['FEEDBACK_DATA_FILE']}")
    click.echo(f"Entries: {store.count()}")


def register_cli(app):
    app.cli.add_command(feedback)
