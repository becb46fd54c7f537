import click
from bookshelf.sa.repositories import ProfileRepository
from ..utils import actor_option, open_session, fail

@click.group()
def profile():
    """Profile commands"""
    pass

@profile.command()
@actor_option
@click.option('--name', 'full_name', required=True, help='Display name')
@click.option('--email', required=True, help='Contact email')
@click.option('--location', default=None, help='Where you can meet to swap books')
@click.option('--bio', default=None, help='A few words about you')
@click.pass_context
def create(ctx, actor_id: str, full_name: str, email: str, location: str, bio: str):
    """Create the profile for a user

    Example:
        bookshelf profile create --as alice --name "Alice" --email alice@example.com
    """
    with open_session(ctx) as session:
        try:
            created = ProfileRepository(session).create_profile(
                user_id=actor_id, full_name=full_name, email=email, location=location, bio=bio
            )
        except ValueError as e:
            fail(str(e))
        click.echo(click.style("Created profile for ", fg='green') + click.style(created.full_name, fg='cyan'))

@profile.command()
@actor_option
@click.pass_context
def show(ctx, actor_id: str):
    """Show a user's profile"""
    with open_session(ctx) as session:
        found = ProfileRepository(session).get_by_user_id(actor_id)
        if found is None:
            fail(f"No profile for user '{actor_id}'", 'not_found')
        click.echo(click.style(found.full_name, fg='cyan', bold=True))
        click.echo(click.style("  Email: ", fg='blue') + found.email)
        if found.location:
            click.echo(click.style("  Location: ", fg='blue') + found.location)
        if found.bio:
            click.echo(click.style("  Bio: ", fg='blue') + found.bio)
