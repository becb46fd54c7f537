import sys
import click
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy.orm import Session

from bookshelf import views
from bookshelf.lending import Rejection
from bookshelf.sa.database import Database

STATUS_COLORS = {
    'available': 'green',
    'borrowed': 'yellow',
    'for_sale': 'blue',
    'not_available': 'red',
    'pending': 'yellow',
    'approved': 'green',
    'rejected': 'red',
    'returned': 'blue',
}

def actor_option(func):
    """Add the --as option naming the acting user."""
    return click.option('--as', 'actor_id', required=True, help='User id to act as')(func)

@contextmanager
def open_session(ctx: click.Context) -> Iterator[Session]:
    """Open a session on the database chosen for this invocation."""
    database = Database((ctx.obj or {}).get('database_url'))
    with database.get_db() as session:
        yield session

def fail(message: str, kind: Optional[str] = None) -> None:
    """Print an error in red and exit with status 1."""
    prefix = f"Error ({kind}): " if kind else "Error: "
    click.echo(click.style(prefix, fg='red') + message, err=True)
    sys.exit(1)

def fail_on_rejection(outcome) -> None:
    if isinstance(outcome, Rejection):
        fail(outcome.message, outcome.kind.value)

def styled_status(status: str) -> str:
    return click.style(status, fg=STATUS_COLORS.get(status, 'white'))

def print_book(book, show_owner: bool = False) -> None:
    """Print one book as a short block"""
    condition, color = views.condition_badge(book.condition)
    click.echo("\n" + click.style(book.title, fg='cyan', bold=True) +
               click.style(f" by {book.author}", fg='blue'))
    click.echo(click.style("  ID: ", fg='blue') + book.id)
    click.echo(click.style("  Status: ", fg='blue') + styled_status(book.status) +
               click.style("  Condition: ", fg='blue') + click.style(condition, fg=color))
    if book.genre:
        click.echo(click.style("  Genre: ", fg='blue') + book.genre)
    if show_owner and book.owner is not None:
        owner = book.owner.full_name
        if book.owner.location:
            owner += f" ({book.owner.location})"
        click.echo(click.style("  Owner: ", fg='blue') + owner)

def print_request_listing(listing: views.RequestListing) -> None:
    """Print one labelled borrow request"""
    title = listing.book_title or "(deleted book)"
    click.echo("\n" + click.style(title, fg='cyan', bold=True) +
               (click.style(f" by {listing.book_author}", fg='blue') if listing.book_author else ""))
    click.echo(click.style("  ID: ", fg='blue') + listing.id)
    click.echo(click.style("  Status: ", fg='blue') + styled_status(listing.status))
    click.echo(click.style(f"  {listing.counterparty_role}: ", fg='blue') + (listing.counterparty_name or "unknown"))
    if listing.due_date:
        click.echo(click.style("  Due: ", fg='blue') + f"{listing.due_date:%Y-%m-%d}")
    if listing.notes:
        click.echo(click.style("  Notes: ", fg='blue') + listing.notes)
    if listing.can_respond:
        click.echo(click.style("  Awaiting your answer: approve or reject", fg='yellow'))
