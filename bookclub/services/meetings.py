from flask import current_app
from sqlalchemy import update

from bookclub.extensions import db
from bookclub.models import Meeting
from bookclub.services.books import get_book_or_404
from bookclub.services.clock import coerce_datetime, utcnow
from bookclub.services.errors import AlreadyFinalized, ValidationError
from bookclub.services.membership import require_admin, require_member
from bookclub.services.phase import can_finalize, get_meeting_or_404, meeting_phase
from bookclub.services.results import service_action
from bookclub.services.themes import find_or_create_theme
from bookclub.services.voting import tally_book_options


def _validate_schedule(meeting_date, nomination_deadline, voting_deadline):
    if (
        nomination_deadline is not None
        and voting_deadline is not None
        and nomination_deadline > voting_deadline
    ):
        raise ValidationError(
            "The nomination deadline must not be after the voting deadline."
        )

    for label, deadline in (
        ("nomination", nomination_deadline),
        ("voting", voting_deadline),
    ):
        if deadline is not None and deadline > meeting_date:
            raise ValidationError(
                f"The {label} deadline must not be after the meeting date."
            )


def _clean_details(details):
    return (details or "").strip() or None


@service_action
def create_meeting(
    book_club_id,
    admin_user_id,
    meeting_date,
    nomination_deadline=None,
    voting_deadline=None,
    theme_name=None,
    details=None,
):
    require_admin(book_club_id, admin_user_id, "Only admins can create meetings.")

    meeting_date = coerce_datetime(meeting_date, "Meeting date", required=True)
    nomination_deadline = coerce_datetime(nomination_deadline, "Nomination deadline")
    voting_deadline = coerce_datetime(voting_deadline, "Voting deadline")
    _validate_schedule(meeting_date, nomination_deadline, voting_deadline)

    theme = find_or_create_theme(book_club_id, admin_user_id, theme_name)

    meeting = Meeting(
        book_club_id=book_club_id,
        meeting_date=meeting_date,
        nomination_deadline=nomination_deadline,
        voting_deadline=voting_deadline,
        theme_id=theme.id if theme else None,
        details=_clean_details(details),
        is_finalized=False,
    )
    db.session.add(meeting)
    db.session.commit()

    current_app.logger.info(
        "Admin %s created meeting %s for club %s", admin_user_id, meeting.id, book_club_id
    )
    return meeting.id


@service_action
def log_past_meeting(
    book_club_id, admin_user_id, meeting_date, book_id, theme_name=None, details=None
):
    """Record a meeting that already happened, finalized with its book."""
    require_admin(book_club_id, admin_user_id, "Only admins can log past meetings.")

    meeting_date = coerce_datetime(meeting_date, "Meeting date", required=True)
    if not book_id:
        raise ValidationError("A book is required to log a past meeting.")
    book = get_book_or_404(book_id)

    theme = find_or_create_theme(book_club_id, admin_user_id, theme_name)

    meeting = Meeting(
        book_club_id=book_club_id,
        meeting_date=meeting_date,
        theme_id=theme.id if theme else None,
        details=_clean_details(details),
        is_finalized=True,
        selected_book_id=book.id,
        finalized_at=utcnow(),
        finalized_by=admin_user_id,
    )
    db.session.add(meeting)
    db.session.commit()

    current_app.logger.info(
        "Admin %s logged past meeting %s for club %s", admin_user_id, meeting.id, book_club_id
    )
    return meeting.id


@service_action
def update_meeting(
    meeting_id,
    admin_user_id,
    meeting_date,
    nomination_deadline=None,
    voting_deadline=None,
    theme_name=None,
    details=None,
    book_id=None,
):
    """Edit a meeting's schedule, theme and details.

    ``theme_name`` of ``None`` leaves the theme alone and an empty string
    clears it. ``book_id`` may only replace the book of a finalized meeting;
    selecting a book for an open meeting goes through finalization.
    """
    meeting = get_meeting_or_404(meeting_id)
    require_admin(meeting.book_club_id, admin_user_id, "Only admins can update meetings.")

    meeting_date = coerce_datetime(meeting_date, "Meeting date", required=True)
    nomination_deadline = coerce_datetime(nomination_deadline, "Nomination deadline")
    voting_deadline = coerce_datetime(voting_deadline, "Voting deadline")
    _validate_schedule(meeting_date, nomination_deadline, voting_deadline)

    if book_id is not None:
        if not meeting.is_finalized:
            raise ValidationError("Finalize the meeting to select its book.")
        meeting.selected_book_id = get_book_or_404(book_id).id

    if theme_name is not None:
        theme = find_or_create_theme(meeting.book_club_id, admin_user_id, theme_name)
        meeting.theme_id = theme.id if theme else None

    meeting.meeting_date = meeting_date
    meeting.nomination_deadline = nomination_deadline
    meeting.voting_deadline = voting_deadline
    meeting.details = _clean_details(details)
    db.session.commit()

    current_app.logger.info("Admin %s updated meeting %s", admin_user_id, meeting.id)
    return meeting.id


@service_action
def delete_meeting(meeting_id, admin_user_id):
    meeting = get_meeting_or_404(meeting_id)
    require_admin(
        meeting.book_club_id, admin_user_id, "You must be an admin to delete meetings."
    )

    db.session.delete(meeting)
    db.session.commit()

    current_app.logger.info("Admin %s deleted meeting %s", admin_user_id, meeting_id)


@service_action
def finalize_meeting(meeting_id, selected_book_id, admin_user_id, now=None):
    """Freeze a meeting with its selected book.

    The write only applies while the meeting is still open; if another
    finalize won the race the stored book is left as it is and the call
    reports ``AlreadyFinalized``.
    """
    meeting = get_meeting_or_404(meeting_id)
    require_admin(
        meeting.book_club_id, admin_user_id, "Only admins can finalize meetings."
    )

    if not can_finalize(meeting_phase(meeting, now)):
        raise AlreadyFinalized()

    if not selected_book_id:
        raise ValidationError("A book must be selected to finalize the meeting.")
    book = get_book_or_404(selected_book_id)

    nominated_book_ids = {option.book_id for option in meeting.book_options}
    if nominated_book_ids and book.id not in nominated_book_ids:
        raise ValidationError("The selected book was not nominated for this meeting.")

    result = db.session.execute(
        update(Meeting)
        .where(Meeting.id == meeting.id, Meeting.is_finalized.is_(False))
        .values(
            is_finalized=True,
            selected_book_id=book.id,
            finalized_at=utcnow(),
            finalized_by=admin_user_id,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        current_app.logger.warning(
            "Finalize of meeting %s by %s lost to a concurrent finalize",
            meeting.id,
            admin_user_id,
        )
        raise AlreadyFinalized()

    db.session.commit()
    current_app.logger.info(
        "Admin %s finalized meeting %s with book %s", admin_user_id, meeting.id, book.id
    )


@service_action
def get_meeting_details(meeting_id, user_id, now=None):
    meeting = get_meeting_or_404(meeting_id)
    member = require_member(meeting.book_club_id, user_id)

    return {
        "meeting": meeting,
        "phase": meeting_phase(meeting, now),
        "tally": tally_book_options(meeting.book_options, user_id),
        "current_user_is_admin": member.is_admin,
    }


@service_action
def list_meetings(book_club_id, user_id, now=None):
    require_member(book_club_id, user_id)

    meetings = (
        Meeting.query.filter_by(book_club_id=book_club_id)
        .order_by(Meeting.meeting_date.desc(), Meeting.id.desc())
        .all()
    )
    return [
        {"meeting": meeting, "phase": meeting_phase(meeting, now)} for meeting in meetings
    ]
