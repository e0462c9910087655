from collections.abc import Mapping

from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookclub.extensions import db
from bookclub.models import Book
from bookclub.services.errors import Conflict, NotFound, ValidationError

DEFAULT_EXTERNAL_SOURCE = "google_books"

_OPTIONAL_FIELDS = (
    "author",
    "isbn",
    "cover_url",
    "description",
    "published_year",
    "page_count",
)


def get_book_or_404(book_id):
    book = db.session.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found.")
    return book


def resolve_or_create_book(search_result):
    """Return the id of the book described by ``search_result``.

    ``search_result`` is either the id of a stored book or a catalog search
    result mapping. Lookup is by ``(external_source, external_id)``; a missing
    book is added to the current session and flushed, never committed, so the
    caller's transaction owns it.
    """
    if isinstance(search_result, int) and not isinstance(search_result, bool):
        return get_book_or_404(search_result).id

    if not isinstance(search_result, Mapping):
        raise ValidationError("A book id or a book search result is required.")

    external_id = str(search_result.get("external_id") or "").strip()
    title = str(search_result.get("title") or "").strip()
    if not external_id or not title:
        raise ValidationError("A book needs an external id and a title.")
    external_source = (
        str(search_result.get("external_source") or "").strip()
        or DEFAULT_EXTERNAL_SOURCE
    )

    existing = Book.query.filter_by(
        external_source=external_source, external_id=external_id
    ).first()
    if existing is not None:
        return existing.id

    book = Book(external_id=external_id, external_source=external_source, title=title)
    for field in _OPTIONAL_FIELDS:
        value = search_result.get(field)
        if value not in (None, ""):
            setattr(book, field, value)

    db.session.add(book)
    try:
        db.session.flush()
    except IntegrityError as exc:
        current_app.logger.warning(
            "Book %s/%s was added concurrently", external_source, external_id
        )
        raise Conflict("This book was just added by someone else. Please retry.") from exc

    current_app.logger.info("Added book %s (%s/%s)", book.id, external_source, external_id)
    return book.id
