import enum

from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookclub.extensions import db
from bookclub.models import BookOption, Vote
from bookclub.services.errors import NotFound, VotingClosed
from bookclub.services.membership import require_member
from bookclub.services.phase import can_vote, meeting_phase
from bookclub.services.results import service_action


class VoteAction(str, enum.Enum):
    ADDED = "added"
    REMOVED = "removed"


@service_action
def toggle_vote(book_option_id, user_id, now=None):
    """Flip the caller's vote on a book option.

    Removes the vote if it exists, otherwise adds it. A unique-key violation on
    insert means a concurrent request already added the same vote, so the
    outcome is still ``ADDED``.
    """
    option = db.session.get(BookOption, book_option_id)
    if option is None:
        raise NotFound("Book option not found.")

    meeting = option.meeting
    require_member(meeting.book_club_id, user_id, "Only members can vote.")
    if not can_vote(meeting_phase(meeting, now)):
        raise VotingClosed()

    existing = Vote.query.filter_by(book_option_id=option.id, user_id=user_id).first()
    if existing is not None:
        Vote.query.filter_by(id=existing.id).delete(synchronize_session=False)
        db.session.commit()
        current_app.logger.info("User %s removed vote on option %s", user_id, option.id)
        return VoteAction.REMOVED

    db.session.add(Vote(book_option_id=option.id, user_id=user_id))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning(
            "Vote by user %s on option %s was already recorded", user_id, option.id
        )
        return VoteAction.ADDED

    current_app.logger.info("User %s voted for option %s", user_id, option.id)
    return VoteAction.ADDED
