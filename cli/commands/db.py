import click
from bookshelf.sa.database import Database

@click.group()
def db():
    """Database management commands"""
    pass

@db.command()
@click.pass_context
def init(ctx):
    """Create any missing tables"""
    database = Database(ctx.obj.get('database_url'))
    database.init_db()
    click.echo(click.style("Database ready: ", fg='green') + click.style(str(database.engine.url), fg='cyan'))
