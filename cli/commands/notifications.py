import click
from bookshelf.sa.repositories import NotificationRepository
from ..utils import actor_option, open_session, fail

@click.group()
def notifications():
    """Notification commands"""
    pass

@notifications.command(name='list')
@actor_option
@click.option('--unread', is_flag=True, help='Only unread notifications')
@click.pass_context
def list_notifications(ctx, actor_id, unread):
    """List your notifications, newest first"""
    with open_session(ctx) as session:
        items = NotificationRepository(session).list_for_user(actor_id, unread_only=unread)
        if not items:
            click.echo(click.style("No notifications", fg='yellow'))
            return
        for item in items:
            marker = click.style("  ", fg='blue') if item.read else click.style("* ", fg='yellow')
            click.echo("\n" + marker + click.style(item.title, fg='cyan', bold=True))
            click.echo("  " + item.message)
            click.echo(click.style(f"  {item.id}  {item.created_at:%Y-%m-%d %H:%M}", fg='blue'))

@notifications.command()
@actor_option
@click.argument('notification_id')
@click.pass_context
def read(ctx, actor_id, notification_id):
    """Mark a notification as read"""
    with open_session(ctx) as session:
        if NotificationRepository(session).mark_read(notification_id, actor_id) is None:
            fail("Notification not found", 'not_found')
        click.echo(click.style("Marked as read", fg='green'))

@notifications.command(name='read-all')
@actor_option
@click.pass_context
def read_all(ctx, actor_id):
    """Mark all your notifications as read"""
    with open_session(ctx) as session:
        updated = NotificationRepository(session).mark_all_read(actor_id)
        click.echo(click.style("Marked ", fg='green') + click.style(str(updated), fg='cyan') +
                   click.style(" notification(s) as read", fg='green'))
