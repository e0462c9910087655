from flask import request
from flask_login import current_user, login_required

from bookclub.routes.responses import book_payload, error_response, request_data
from bookclub.services.rankings import (
    get_book_club_years,
    get_global_rankings,
    get_year_books,
    get_years_with_rankings,
    save_year_rankings,
)


def register_ranking_routes(app):
    @app.route("/book-clubs/<int:book_club_id>/years")
    @login_required
    def club_years(book_club_id):
        result = get_book_club_years(book_club_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "years": result.value}

    @app.route("/book-clubs/<int:book_club_id>/rankings/<int:year>", methods=["GET", "POST"])
    @login_required
    def personal_rankings(book_club_id, year):
        if request.method == "GET":
            result = get_year_books(book_club_id, year, current_user.id)
            if not result.ok:
                return error_response(result)
            return {
                "ok": True,
                "books": [
                    {
                        "book": book_payload(row["book"]),
                        "meeting_date": row["meeting_date"].isoformat(),
                        "rank": row["rank"],
                    }
                    for row in result.value
                ],
            }

        data = request_data()
        result = save_year_rankings(
            current_user.id,
            book_club_id,
            year,
            data.get("ranked") or [],
            data.get("unread") or [],
        )
        if not result.ok:
            return error_response(result)
        return {"ok": True}

    @app.route("/book-clubs/<int:book_club_id>/global-rankings")
    @login_required
    def ranking_years(book_club_id):
        result = get_years_with_rankings(book_club_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "years": result.value}

    @app.route("/book-clubs/<int:book_club_id>/global-rankings/<int:year>")
    @login_required
    def global_rankings(book_club_id, year):
        result = get_global_rankings(book_club_id, year, current_user.id)
        if not result.ok:
            return error_response(result)
        return {
            "ok": True,
            "rankings": [
                {
                    "book_id": row["book_id"],
                    "book": book_payload(row["book"]),
                    "total_points": row["total_points"],
                    "number_of_rankings": row["number_of_rankings"],
                    "average_rank": row["average_rank"],
                }
                for row in result.value
            ],
        }
