from datetime import datetime

from bookclub.models import Meeting, PersonalRanking
from bookclub.services.rankings import (
    get_book_club_years,
    get_global_rankings,
    get_year_books,
    get_years_with_rankings,
    save_year_rankings,
)


def _snapshot(user_id, book_club_id, year):
    rows = PersonalRanking.query.filter_by(
        user_id=user_id, book_club_id=book_club_id, year=year
    ).all()
    return {row.book_id: row.rank for row in rows}


def _finalized(db_session, book_club, book, meeting_date):
    meeting = Meeting(
        book_club_id=book_club.id,
        meeting_date=meeting_date,
        is_finalized=True,
        selected_book_id=book.id,
    )
    db_session.add(meeting)
    db_session.commit()
    return meeting


def test_save_stores_ranks_and_unread_books(book_club, member_user, make_book):
    x, y, z = make_book("X"), make_book("Y"), make_book("Z")

    result = save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": y.id, "rank": 2}, {"book_id": x.id, "rank": 1}],
        [z.id],
    )

    assert result.ok
    assert _snapshot(member_user.id, book_club.id, 2025) == {x.id: 1, y.id: 2, z.id: None}


def test_save_replaces_the_whole_snapshot(book_club, member_user, make_book):
    x, y, z = make_book("X"), make_book("Y"), make_book("Z")
    save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": x.id, "rank": 1}, {"book_id": y.id, "rank": 2}, {"book_id": z.id, "rank": 3}],
        [],
    )

    save_year_rankings(member_user.id, book_club.id, 2025, [{"book_id": z.id, "rank": 1}], [x.id])

    snapshot = _snapshot(member_user.id, book_club.id, 2025)
    assert snapshot == {z.id: 1, x.id: None}
    ranks = sorted(rank for rank in snapshot.values() if rank is not None)
    assert ranks == [1]


def test_other_years_and_members_are_untouched(book_club, admin_user, member_user, make_book):
    x = make_book("X")
    save_year_rankings(admin_user.id, book_club.id, 2025, [{"book_id": x.id, "rank": 1}], [])
    save_year_rankings(member_user.id, book_club.id, 2024, [{"book_id": x.id, "rank": 1}], [])

    save_year_rankings(member_user.id, book_club.id, 2025, [], [x.id])

    assert _snapshot(admin_user.id, book_club.id, 2025) == {x.id: 1}
    assert _snapshot(member_user.id, book_club.id, 2024) == {x.id: 1}


def test_ranks_with_gaps_are_rejected(book_club, member_user, make_book):
    x, y = make_book("X"), make_book("Y")
    save_year_rankings(member_user.id, book_club.id, 2025, [{"book_id": x.id, "rank": 1}], [])

    result = save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": x.id, "rank": 1}, {"book_id": y.id, "rank": 3}],
        [],
    )

    assert result.kind == "conflict"
    # the previous snapshot survives a rejected save
    assert _snapshot(member_user.id, book_club.id, 2025) == {x.id: 1}


def test_duplicate_ranks_are_rejected(book_club, member_user, make_book):
    x, y = make_book("X"), make_book("Y")

    result = save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": x.id, "rank": 1}, {"book_id": y.id, "rank": 1}],
        [],
    )

    assert result.kind == "conflict"


def test_book_cannot_be_both_ranked_and_unread(book_club, member_user, make_book):
    x = make_book("X")

    result = save_year_rankings(
        member_user.id, book_club.id, 2025, [{"book_id": x.id, "rank": 1}], [x.id]
    )

    assert result.kind == "validation_error"


def test_unknown_books_are_rejected(book_club, member_user):
    result = save_year_rankings(
        member_user.id, book_club.id, 2025, [{"book_id": 777, "rank": 1}], []
    )

    assert result.kind == "not_found"


def test_non_members_cannot_save(book_club, outsider, make_book):
    x = make_book("X")

    result = save_year_rankings(outsider.id, book_club.id, 2025, [{"book_id": x.id, "rank": 1}], [])

    assert result.kind == "forbidden"


def test_global_rankings_use_borda_points(
    book_club, admin_user, member_user, make_user, add_member, make_book
):
    third = add_member(make_user("reader2"))
    x, y, z = make_book("X"), make_book("Y"), make_book("Z")
    save_year_rankings(
        admin_user.id,
        book_club.id,
        2025,
        [{"book_id": x.id, "rank": 1}, {"book_id": y.id, "rank": 2}],
        [z.id],
    )
    save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": x.id, "rank": 2}, {"book_id": y.id, "rank": 1}],
        [],
    )
    save_year_rankings(third.id, book_club.id, 2025, [], [x.id, y.id, z.id])

    result = get_global_rankings(book_club.id, 2025, member_user.id)

    assert result.ok
    by_book = {row["book_id"]: row for row in result.value}
    assert set(by_book) == {x.id, y.id}
    assert by_book[x.id]["total_points"] == 3
    assert by_book[y.id]["total_points"] == 3
    assert by_book[x.id]["average_rank"] == 1.5
    assert by_book[x.id]["number_of_rankings"] == 2
    assert by_book[x.id]["book"].title == "X"


def test_global_rankings_empty_year(book_club, member_user):
    assert get_global_rankings(book_club.id, 1999, member_user.id).value == []


def test_years_with_rankings(book_club, member_user, make_book):
    x = make_book("X")
    save_year_rankings(member_user.id, book_club.id, 2023, [{"book_id": x.id, "rank": 1}], [])
    save_year_rankings(member_user.id, book_club.id, 2025, [{"book_id": x.id, "rank": 1}], [])
    save_year_rankings(member_user.id, book_club.id, 2024, [], [x.id])

    assert get_years_with_rankings(book_club.id, member_user.id).value == [2025, 2023]


def test_book_club_years_come_from_finalized_meetings(
    db_session, book_club, member_user, make_book
):
    _finalized(db_session, book_club, make_book("X"), datetime(2024, 5, 1))
    _finalized(db_session, book_club, make_book("Y"), datetime(2025, 2, 1))
    _finalized(db_session, book_club, make_book("Z"), datetime(2025, 9, 1))

    assert get_book_club_years(book_club.id, member_user.id).value == [2025, 2024]


def test_year_books_list_ranked_first_then_unranked(
    db_session, book_club, member_user, make_book
):
    x, y, z = make_book("X"), make_book("Y"), make_book("Z")
    _finalized(db_session, book_club, x, datetime(2025, 1, 10))
    _finalized(db_session, book_club, y, datetime(2025, 2, 10))
    _finalized(db_session, book_club, z, datetime(2025, 3, 10))
    _finalized(db_session, book_club, make_book("Older"), datetime(2024, 12, 31, 20, 0))
    save_year_rankings(
        member_user.id,
        book_club.id,
        2025,
        [{"book_id": z.id, "rank": 1}, {"book_id": x.id, "rank": 2}],
        [y.id],
    )

    result = get_year_books(book_club.id, 2025, member_user.id)

    assert [(row["book"].title, row["rank"]) for row in result.value] == [
        ("Z", 1),
        ("X", 2),
        ("Y", None),
    ]


def test_standings_are_for_members_only(book_club, outsider):
    assert get_global_rankings(book_club.id, 2025, outsider.id).kind == "forbidden"
    assert get_years_with_rankings(book_club.id, outsider.id).kind == "forbidden"


def test_years_outside_the_calendar_are_rejected(book_club, member_user):
    for year in (0, 9999):
        result = get_year_books(book_club.id, year, member_user.id)

        assert result.kind == "validation_error"
        assert result.error.message == "Year must be between 1 and 9998."
