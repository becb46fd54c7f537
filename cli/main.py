# cli/main.py
import logging
import click
from bookshelf.config import settings
from .commands.db import db
from .commands.profile import profile
from .commands.book import book
from .commands.request import request
from .commands.notifications import notifications
from .commands.dashboard import dashboard

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None,
              help='Database URL (defaults to DATABASE_URL or sqlite:///bookshelf.db)')
@click.option('--verbose/--no-verbose', default=False, help='Show debug logging')
@click.pass_context
def cli(ctx, database_url, verbose):
    """Bookshelf CLI: share, browse and borrow books"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format=settings.log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['database_url'] = database_url

cli.add_command(db)
cli.add_command(profile)
cli.add_command(book)
cli.add_command(request)
cli.add_command(notifications)
cli.add_command(dashboard)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
