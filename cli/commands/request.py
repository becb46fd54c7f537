import click
from bookshelf import views
from bookshelf.lending import LendingService
from bookshelf.sa.models.enums import RequestStatus, values
from bookshelf.sa.repositories import BorrowRequestRepository
from ..utils import actor_option, open_session, fail_on_rejection, print_request_listing

@click.group()
def request():
    """Borrow request commands"""
    pass

@request.command()
@actor_option
@click.argument('book_id')
@click.option('--notes', default=None, help='Message to the owner')
@click.pass_context
def send(ctx, actor_id, book_id, notes):
    """Ask to borrow a book"""
    with open_session(ctx) as session:
        outcome = LendingService(session).request_borrow(book_id, actor_id, notes=notes)
        fail_on_rejection(outcome)
        click.echo(click.style("Borrow request sent to the owner: ", fg='green') +
                   click.style(outcome.request.id, fg='cyan'))

@request.command(name='list')
@actor_option
@click.option('--status', type=click.Choice(values(RequestStatus)), default=None)
@click.pass_context
def list_requests(ctx, actor_id, status):
    """List requests you sent or received"""
    with open_session(ctx) as session:
        requests = BorrowRequestRepository(session).list_for_user(actor_id, status=status)
        if not requests:
            click.echo(click.style("No requests found", fg='yellow'))
            return
        for listing in views.label_requests(requests, actor_id):
            print_request_listing(listing)

@request.command()
@actor_option
@click.argument('request_id')
@click.option('--due', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Return date (defaults to the configured loan period)')
@click.pass_context
def approve(ctx, actor_id, request_id, due):
    """Approve a pending request for one of your books"""
    with open_session(ctx) as session:
        outcome = LendingService(session).approve(request_id, actor_id, due_date=due)
        fail_on_rejection(outcome)
        click.echo(click.style("Approved. Due back ", fg='green') +
                   click.style(f"{outcome.request.due_date:%Y-%m-%d}", fg='cyan'))

@request.command()
@actor_option
@click.argument('request_id')
@click.pass_context
def reject(ctx, actor_id, request_id):
    """Decline a pending request for one of your books"""
    with open_session(ctx) as session:
        outcome = LendingService(session).reject(request_id, actor_id)
        fail_on_rejection(outcome)
        click.echo(click.style("Request declined", fg='green'))

@request.command(name='return')
@actor_option
@click.argument('request_id')
@click.pass_context
def return_book(ctx, actor_id, request_id):
    """Mark a borrowed book as returned"""
    with open_session(ctx) as session:
        outcome = LendingService(session).mark_returned(request_id, actor_id)
        fail_on_rejection(outcome)
        click.echo(click.style("Marked as returned", fg='green'))
