from datetime import MAXYEAR, MINYEAR, datetime
from numbers import Integral

from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookclub.models import Book, Meeting, PersonalRanking
from bookclub.extensions import db
from bookclub.services.errors import NotFound, RankingConflict, ValidationError
from bookclub.services.membership import require_member
from bookclub.services.results import service_action
from bookclub.services.voting import tally_borda


def _is_int(value):
    return isinstance(value, Integral) and not isinstance(value, bool)


def _check_year(year):
    if not _is_int(year):
        raise ValidationError("Year must be an integer.")
    # the bounds of a year run to January 1st of the next one
    if not MINYEAR <= year < MAXYEAR:
        raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR - 1}.")


def _year_bounds(year):
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


def _validate_snapshot(ranked, unread):
    """Return ``(ranked_pairs, unread_ids)`` or raise.

    Every book appears once across both lists and the ranks form exactly
    ``{1..K}`` for ``K`` ranked books.
    """
    ranked_pairs = []
    for entry in ranked:
        try:
            book_id, rank = entry["book_id"], entry["rank"]
        except (KeyError, TypeError):
            raise ValidationError("Each ranked book needs a book_id and a rank.") from None
        if not _is_int(book_id) or not _is_int(rank):
            raise ValidationError("Book ids and ranks must be integers.")
        ranked_pairs.append((book_id, rank))

    unread_ids = list(unread)
    if not all(_is_int(book_id) for book_id in unread_ids):
        raise ValidationError("Book ids must be integers.")

    all_ids = [book_id for book_id, _ in ranked_pairs] + unread_ids
    if len(set(all_ids)) != len(all_ids):
        raise ValidationError("A book can only be ranked or marked unread once.")

    ranks = sorted(rank for _, rank in ranked_pairs)
    if ranks != list(range(1, len(ranks) + 1)):
        raise RankingConflict()

    return ranked_pairs, unread_ids


@service_action
def save_year_rankings(user_id, book_club_id, year, ranked, unread):
    """Replace the caller's whole ranking snapshot for a club and year.

    The old rows are deleted and the new ones inserted in one transaction;
    concurrent saves by the same user are last-write-wins.
    """
    require_member(book_club_id, user_id, "You must be a member to save rankings.")
    _check_year(year)

    ranked_pairs, unread_ids = _validate_snapshot(ranked or [], unread or [])

    book_ids = {book_id for book_id, _ in ranked_pairs} | set(unread_ids)
    if book_ids:
        found = {book.id for book in Book.query.filter(Book.id.in_(book_ids)).all()}
        missing = book_ids - found
        if missing:
            raise NotFound(f"Unknown book ids: {sorted(missing)}")

    PersonalRanking.query.filter_by(
        user_id=user_id, book_club_id=book_club_id, year=year
    ).delete(synchronize_session=False)

    rows = [
        PersonalRanking(
            user_id=user_id, book_club_id=book_club_id, year=year, book_id=book_id, rank=rank
        )
        for book_id, rank in ranked_pairs
    ]
    rows.extend(
        PersonalRanking(
            user_id=user_id, book_club_id=book_club_id, year=year, book_id=book_id, rank=None
        )
        for book_id in unread_ids
    )
    db.session.add_all(rows)

    try:
        db.session.commit()
    except IntegrityError as exc:
        current_app.logger.warning(
            "Concurrent ranking save for user %s, club %s, year %s", user_id, book_club_id, year
        )
        raise RankingConflict(
            "Your rankings were saved from another window. Reload and try again."
        ) from exc

    current_app.logger.info(
        "User %s saved %s ranked and %s unread books for club %s, %s",
        user_id,
        len(ranked_pairs),
        len(unread_ids),
        book_club_id,
        year,
    )


@service_action
def get_global_rankings(book_club_id, year, user_id):
    require_member(book_club_id, user_id)
    _check_year(year)

    rankings = (
        PersonalRanking.query.filter_by(book_club_id=book_club_id, year=year)
        .filter(PersonalRanking.rank.isnot(None))
        .order_by(PersonalRanking.id.asc())
        .all()
    )
    results = tally_borda(rankings)

    book_ids = [row["book_id"] for row in results]
    books = {}
    if book_ids:
        books = {book.id: book for book in Book.query.filter(Book.id.in_(book_ids)).all()}

    for row in results:
        row["book"] = books.get(row["book_id"])
    return results


@service_action
def get_years_with_rankings(book_club_id, user_id):
    require_member(book_club_id, user_id)

    rows = (
        db.session.query(PersonalRanking.year)
        .filter(
            PersonalRanking.book_club_id == book_club_id,
            PersonalRanking.rank.isnot(None),
        )
        .distinct()
        .all()
    )
    return sorted((row.year for row in rows), reverse=True)


def _finalized_meetings(book_club_id):
    return Meeting.query.filter(
        Meeting.book_club_id == book_club_id,
        Meeting.is_finalized.is_(True),
        Meeting.selected_book_id.isnot(None),
    )


@service_action
def get_book_club_years(book_club_id, user_id):
    """Years with at least one finalized meeting, most recent first."""
    require_member(book_club_id, user_id)

    meetings = _finalized_meetings(book_club_id).all()
    return sorted({meeting.meeting_date.year for meeting in meetings}, reverse=True)


@service_action
def get_year_books(book_club_id, year, user_id):
    """Books the club read in ``year`` with the caller's rank for each.

    Ranked books come first in rank order, then the rest in meeting order.
    A rank of ``None`` means the caller marked the book unread or has not
    ranked it yet.
    """
    require_member(book_club_id, user_id)
    _check_year(year)

    start, end = _year_bounds(year)
    meetings = (
        _finalized_meetings(book_club_id)
        .filter(Meeting.meeting_date >= start, Meeting.meeting_date < end)
        .order_by(Meeting.meeting_date.asc(), Meeting.id.asc())
        .all()
    )
    if not meetings:
        return []

    ranks = {
        ranking.book_id: ranking.rank
        for ranking in PersonalRanking.query.filter_by(
            user_id=user_id, book_club_id=book_club_id, year=year
        ).all()
    }

    books = []
    seen = set()
    for meeting in meetings:
        if meeting.selected_book_id in seen:
            continue
        seen.add(meeting.selected_book_id)
        books.append(
            {
                "book": meeting.selected_book,
                "meeting_date": meeting.meeting_date,
                "rank": ranks.get(meeting.selected_book_id),
            }
        )

    books.sort(key=lambda row: (row["rank"] is None, row["rank"] or 0))
    return books
