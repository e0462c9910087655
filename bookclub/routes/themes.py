from flask import request
from flask_login import current_user, login_required

from bookclub.routes.responses import error_response, request_data
from bookclub.services.themes import (
    get_theme_suggestions,
    list_themes,
    suggest_theme,
    toggle_theme_upvote,
)


def register_theme_routes(app):
    @app.route("/book-clubs/<int:book_club_id>/themes", methods=["GET", "POST"])
    @login_required
    def club_themes(book_club_id):
        if request.method == "GET":
            result = list_themes(book_club_id, current_user.id)
            if not result.ok:
                return error_response(result)
            return {
                "ok": True,
                "themes": [
                    {
                        "id": row["theme"].id,
                        "name": row["theme"].name,
                        "submitted_by": row["theme"].submitted_by,
                        "upvote_count": row["upvote_count"],
                        "user_has_upvoted": row["user_has_upvoted"],
                        "times_used": row["times_used"],
                    }
                    for row in result.value
                ],
            }

        data = request_data()
        result = suggest_theme(book_club_id, current_user.id, data.get("name"))
        if not result.ok:
            return error_response(result)
        return {"ok": True, "theme_id": result.value}, 201

    @app.route("/book-clubs/<int:book_club_id>/themes/suggestions")
    @login_required
    def theme_suggestions(book_club_id):
        result = get_theme_suggestions(book_club_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "suggestions": result.value}

    @app.route("/themes/<int:theme_id>/upvote", methods=["POST"])
    @login_required
    def upvote_theme(theme_id):
        result = toggle_theme_upvote(theme_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "action": result.value.value}
