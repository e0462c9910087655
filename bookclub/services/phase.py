"""Meeting lifecycle.

The phase of a meeting is never stored. It is derived on every read from the
deadlines and the finalization flag, so a meeting whose deadlines lapsed
without an admin finalizing it stays in ``VOTING``.
"""

import enum

from bookclub.extensions import db
from bookclub.models import Meeting
from bookclub.services.clock import to_naive_utc, utcnow
from bookclub.services.errors import NotFound
from bookclub.services.results import service_action


class Phase(str, enum.Enum):
    NOMINATING = "nominating"
    VOTING = "voting"
    FINALIZED = "finalized"
    INACTIVE = "inactive"


def derive_phase(now, nomination_deadline, voting_deadline, is_finalized):
    # voting_deadline is informational only: there is no phase after VOTING
    # until an admin finalizes.
    if is_finalized:
        return Phase.FINALIZED

    if nomination_deadline is None or to_naive_utc(now) <= to_naive_utc(
        nomination_deadline
    ):
        return Phase.NOMINATING

    return Phase.VOTING


def meeting_phase(meeting, now=None):
    return derive_phase(
        now or utcnow(),
        meeting.nomination_deadline,
        meeting.voting_deadline,
        meeting.is_finalized,
    )


def can_nominate(phase):
    return phase is Phase.NOMINATING


def can_vote(phase):
    return phase is Phase.VOTING


def can_finalize(phase):
    return phase in (Phase.NOMINATING, Phase.VOTING)


def get_meeting_or_404(meeting_id):
    meeting = db.session.get(Meeting, meeting_id)
    if meeting is None:
        raise NotFound("Meeting not found.")
    return meeting


@service_action
def get_meeting_phase(meeting_id, now=None):
    return meeting_phase(get_meeting_or_404(meeting_id), now)


@service_action
def get_book_club_state(book_club_id, now=None):
    """Phase of the club's next upcoming meeting, or ``INACTIVE`` if none.

    Also returns the most recently finalized meeting so callers can show the
    club's current book.
    """
    now = to_naive_utc(now or utcnow())

    upcoming = (
        Meeting.query.filter_by(book_club_id=book_club_id, is_finalized=False)
        .filter(Meeting.meeting_date >= now)
        .order_by(Meeting.meeting_date.asc(), Meeting.id.asc())
        .first()
    )
    previous = (
        Meeting.query.filter_by(book_club_id=book_club_id, is_finalized=True)
        .order_by(Meeting.meeting_date.desc(), Meeting.id.desc())
        .first()
    )

    return {
        "state": meeting_phase(upcoming, now) if upcoming else Phase.INACTIVE,
        "meeting": upcoming,
        "previous_meeting": previous,
    }
