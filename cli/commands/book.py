import click
from bookshelf import views
from bookshelf.isbn import lookup_isbn
from bookshelf.lending import LendingService
from bookshelf.sa.models.enums import BookCondition, BookStatus, values
from bookshelf.sa.repositories import BookRepository
from ..utils import actor_option, open_session, fail, fail_on_rejection, print_book

@click.group()
def book():
    """Personal library commands"""
    pass

@book.command()
@actor_option
@click.option('--title', default=None, help='Book title (required unless --isbn finds it)')
@click.option('--author', default=None, help='Book author (required unless --isbn finds it)')
@click.option('--genre', default=None)
@click.option('--description', default=None)
@click.option('--isbn', default=None, help='ISBN; used to pre-fill missing fields from Open Library')
@click.option('--pages', type=click.IntRange(min=0), default=None)
@click.option('--year', 'publication_year', type=click.IntRange(min=0), default=None)
@click.option('--condition', type=click.Choice(values(BookCondition)), default=BookCondition.GOOD.value)
@click.option('--status', type=click.Choice([s for s in values(BookStatus) if s != BookStatus.BORROWED.value]),
              default=BookStatus.AVAILABLE.value)
@click.pass_context
def add(ctx, actor_id, title, author, genre, description, isbn, pages, publication_year, condition, status):
    """Add a book to your library

    Fields not given on the command line are filled from an ISBN lookup when
    --isbn is set. A failed lookup never blocks manual entry.

    Example:
        bookshelf book add --as alice --title "The Hobbit" --author "J.R.R. Tolkien"
        bookshelf book add --as alice --isbn 9780261103344
    """
    if isbn and not (title and author and pages and publication_year and description):
        found = lookup_isbn(isbn)
        if found:
            click.echo(click.style("Found on Open Library: ", fg='blue') + click.style(found.title, fg='cyan'))
            title = title or found.title
            author = author or ", ".join(found.authors) or None
            pages = pages if pages is not None else found.pages
            publication_year = publication_year if publication_year is not None else found.publication_year
            description = description or found.description
        else:
            click.echo(click.style("No ISBN match, using the values given", fg='yellow'))

    if not title or not author:
        fail("--title and --author are required")

    with open_session(ctx) as session:
        try:
            created = BookRepository(session).create_book(
                owner_id=actor_id,
                title=title,
                author=author,
                genre=genre,
                description=description,
                isbn=isbn,
                pages=pages,
                publication_year=publication_year,
                condition=condition,
                status=status
            )
        except ValueError as e:
            fail(str(e))
        click.echo(click.style("Added to your library:", fg='green'))
        print_book(created)

@book.command(name='list')
@actor_option
@click.option('--query', default=None, help='Filter by title, author or genre')
@click.pass_context
def list_books(ctx, actor_id, query):
    """List your own books, newest first"""
    with open_session(ctx) as session:
        books = views.search_books(BookRepository(session).list_by_owner(actor_id), query)
        if not books:
            click.echo(click.style("No books found", fg='yellow'))
            return
        for item in books:
            print_book(item)
        click.echo(click.style(f"\n{len(books)} book(s)", fg='blue'))

@book.command()
@actor_option
@click.option('--query', default=None, help='Filter by title, author or genre')
@click.pass_context
def browse(ctx, actor_id, query):
    """List books other users have available to borrow"""
    with open_session(ctx) as session:
        candidates = BookRepository(session).list_available(exclude_owner_id=actor_id)
        books = views.browse_books(candidates, actor_id, query)
        if not books:
            message = "Try adjusting your search" if query else "No books are currently available"
            click.echo(click.style(message, fg='yellow'))
            return
        for item in books:
            print_book(item, show_owner=True)

@book.command()
@actor_option
@click.argument('book_id')
@click.option('--title', default=None)
@click.option('--author', default=None)
@click.option('--genre', default=None)
@click.option('--description', default=None)
@click.option('--pages', type=click.IntRange(min=0), default=None)
@click.option('--condition', type=click.Choice(values(BookCondition)), default=None)
@click.option('--status', type=click.Choice(values(BookStatus)), default=None)
@click.pass_context
def edit(ctx, actor_id, book_id, **fields):
    """Edit one of your books"""
    changes = {name: value for name, value in fields.items() if value is not None}
    if not changes:
        fail("Nothing to change")
    with open_session(ctx) as session:
        try:
            outcome = LendingService(session).edit_book(book_id, actor_id, **changes)
        except ValueError as e:
            fail(str(e))
        fail_on_rejection(outcome)
        click.echo(click.style("Updated:", fg='green'))
        print_book(outcome.book)

@book.command()
@actor_option
@click.argument('book_id')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx, actor_id, book_id, yes):
    """Delete one of your books (not while a request is active)"""
    if not yes:
        click.confirm('Are you sure you want to delete this book?', abort=True)
    with open_session(ctx) as session:
        outcome = LendingService(session).delete_book(book_id, actor_id)
        fail_on_rejection(outcome)
        click.echo(click.style("Book deleted", fg='green'))

@book.command()
@click.argument('isbn')
def lookup(isbn):
    """Look up book details by ISBN"""
    found = lookup_isbn(isbn)
    if found is None:
        fail("No book found for this ISBN", 'not_found')
    click.echo(click.style(found.title, fg='cyan', bold=True))
    if found.authors:
        click.echo(click.style("  Authors: ", fg='blue') + ", ".join(found.authors))
    if found.pages:
        click.echo(click.style("  Pages: ", fg='blue') + str(found.pages))
    if found.publication_year:
        click.echo(click.style("  Published: ", fg='blue') + str(found.publication_year))
