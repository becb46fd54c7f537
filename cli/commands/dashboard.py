import click
from bookshelf import views
from bookshelf.sa.repositories import BookRepository, BorrowRequestRepository, NotificationRepository
from ..utils import actor_option, open_session

@click.command()
@actor_option
@click.pass_context
def dashboard(ctx, actor_id):
    """Show your library and request counts"""
    with open_session(ctx) as session:
        stats = views.dashboard_stats(
            BookRepository(session).list_by_owner(actor_id),
            BorrowRequestRepository(session).list_for_user(actor_id)
        )
        unread = NotificationRepository(session).count_unread(actor_id)

    rows = [
        ("Total books", stats.total_books),
        ("Available", stats.available_books),
        ("Borrowed out", stats.borrowed_books),
        ("Pending requests", stats.pending_requests),
        ("Unread notifications", unread),
    ]
    click.echo("\n" + click.style("Dashboard:", fg='blue'))
    for label, value in rows:
        click.echo(click.style(f"{label}: ", fg='blue') + click.style(str(value), fg='cyan'))
