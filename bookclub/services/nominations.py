from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookclub.extensions import db
from bookclub.models import BookOption
from bookclub.services.books import resolve_or_create_book
from bookclub.services.errors import DuplicateNomination, NominationsClosed
from bookclub.services.membership import require_member
from bookclub.services.phase import Phase, can_nominate, get_meeting_or_404, meeting_phase
from bookclub.services.results import service_action


@service_action
def nominate(meeting_id, book, user_id, now=None):
    """Propose a book for a meeting and return the new book option id.

    Resolving the book and inserting the option happen in one transaction, so
    a rejected nomination never leaves a half-created book behind.
    """
    meeting = get_meeting_or_404(meeting_id)
    require_member(
        meeting.book_club_id,
        user_id,
        "You must be a member of this book club to nominate books.",
    )

    phase = meeting_phase(meeting, now)
    if not can_nominate(phase):
        if phase is Phase.FINALIZED:
            raise NominationsClosed("Meeting has been finalized.")
        raise NominationsClosed("Nomination period has ended.")

    book_id = resolve_or_create_book(book)

    existing = BookOption.query.filter_by(meeting_id=meeting.id, book_id=book_id).first()
    if existing is not None:
        raise DuplicateNomination()

    option = BookOption(meeting_id=meeting.id, book_id=book_id, added_by=user_id)
    db.session.add(option)
    try:
        db.session.flush()
    except IntegrityError as exc:
        raise DuplicateNomination() from exc

    db.session.commit()
    current_app.logger.info(
        "User %s nominated book %s for meeting %s", user_id, book_id, meeting.id
    )
    return option.id
