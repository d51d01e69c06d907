import click
from flask.cli import AppGroup, with_appcontext

from app.extensions import db
from app.models import User, STAFF_ROLES
from app.services import token_service
from app.utils.audit import log_audit


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Database initialized successfully!")


@click.command('create-user')
@click.argument('username')
@click.option('--role', type=click.Choice(STAFF_ROLES), required=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--name', default=None, help='Display name (defaults to the username)')
@click.option('--email', default=None)
@with_appcontext
def create_user_command(username, role, password, name, email):
    """Create a doctor or receptionist account."""
    if User.query.filter_by(username=username).first():
        raise click.ClickException(f"User '{username}' already exists")

    user = User(
        username=username,
        email=email,
        name=name or username,
        role=role,
        is_active=True
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    click.echo(f"Created: {username} ({role})")


token_cli = AppGroup('token', help='Inspect or reset the visit token counter.')


@token_cli.command('current')
def token_current_command():
    """Print the last issued token."""
    click.echo(token_service.current_token())


@token_cli.command('reset')
@click.argument('value', type=click.IntRange(min=0), default=0)
@click.confirmation_option(prompt='Resetting can re-issue tokens already in use. Continue?')
def token_reset_command(value):
    """Overwrite the token counter (operational recovery only)."""
    previous = token_service.current_token()
    token_service.reset_counter(value)
    log_audit('counter', 'reset', entity_id='token', details={'from': previous, 'to': value})
    click.echo(f"Token counter reset from {previous} to {value}")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_user_command)
    app.cli.add_command(token_cli)
