from datetime import datetime

from bookclub.models import Meeting, PersonalRanking


def _finalized(db_session, book_club, book, meeting_date):
    db_session.add(
        Meeting(
            book_club_id=book_club.id,
            meeting_date=meeting_date,
            is_finalized=True,
            selected_book_id=book.id,
        )
    )
    db_session.commit()


def test_rankings_require_login(client, book_club):
    assert client.get(f"/book-clubs/{book_club.id}/global-rankings/2025").status_code == 401


def test_save_and_read_personal_rankings(login, db_session, book_club, member_user, make_book):
    x, y = make_book("X"), make_book("Y")
    _finalized(db_session, book_club, x, datetime(2025, 3, 1))
    _finalized(db_session, book_club, y, datetime(2025, 6, 1))
    x_id, y_id = x.id, y.id
    client = login(member_user)

    saved = client.post(
        f"/book-clubs/{book_club.id}/rankings/2025",
        json={"ranked": [{"book_id": y_id, "rank": 1}], "unread": [x_id]},
    )
    body = client.get(f"/book-clubs/{book_club.id}/rankings/2025").get_json()

    assert saved.get_json() == {"ok": True}
    assert [(row["book"]["id"], row["rank"]) for row in body["books"]] == [
        (y_id, 1),
        (x_id, None),
    ]
    assert client.get(f"/book-clubs/{book_club.id}/years").get_json()["years"] == [2025]


def test_gapped_ranks_are_conflicts(login, book_club, member_user, make_book):
    x = make_book("X")
    client = login(member_user)

    response = client.post(
        f"/book-clubs/{book_club.id}/rankings/2025",
        json={"ranked": [{"book_id": x.id, "rank": 2}]},
    )

    assert response.status_code == 409


def test_global_rankings_payload(login, book_club, admin_user, member_user, make_book):
    x, y = make_book("X"), make_book("Y")
    x_id, y_id = x.id, y.id
    login(admin_user).post(
        f"/book-clubs/{book_club.id}/rankings/2025",
        json={"ranked": [{"book_id": x_id, "rank": 1}, {"book_id": y_id, "rank": 2}]},
    )
    client = login(member_user)
    client.post(
        f"/book-clubs/{book_club.id}/rankings/2025",
        json={"ranked": [{"book_id": x_id, "rank": 1}]},
    )

    body = client.get(f"/book-clubs/{book_club.id}/global-rankings/2025").get_json()

    assert [row["book_id"] for row in body["rankings"]] == [x_id, y_id]
    assert body["rankings"][0]["total_points"] == 3
    assert body["rankings"][0]["book"]["title"] == "X"
    assert body["rankings"][1]["total_points"] == 1
    years = client.get(f"/book-clubs/{book_club.id}/global-rankings").get_json()["years"]
    assert years == [2025]


def test_out_of_range_year_is_bad_request(login, book_club, member_user):
    client = login(member_user)

    response = client.get(f"/book-clubs/{book_club.id}/rankings/9999")

    assert response.status_code == 400
    assert response.get_json()["kind"] == "validation_error"


def test_outsider_cannot_read_global_rankings(login, book_club, outsider):
    client = login(outsider)

    assert client.get(f"/book-clubs/{book_club.id}/global-rankings/2025").status_code == 403
    assert client.get(f"/book-clubs/{book_club.id}/global-rankings").status_code == 403


def test_each_login_saves_under_its_own_user(
    login, db_session, book_club, admin_user, member_user, make_book
):
    book_id = make_book("X").id
    admin_id, member_id = admin_user.id, member_user.id
    payload = {"ranked": [{"book_id": book_id, "rank": 1}]}

    login(admin_user).post(f"/book-clubs/{book_club.id}/rankings/2025", json=payload)
    login(member_user).post(f"/book-clubs/{book_club.id}/rankings/2025", json=payload)

    owners = sorted(row.user_id for row in PersonalRanking.query.all())
    assert owners == sorted([admin_id, member_id])
