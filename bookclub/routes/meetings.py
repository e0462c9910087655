from flask import request
from flask_login import current_user, login_required

from bookclub.routes.responses import (
    error_response,
    form_id,
    meeting_payload,
    option_result_payload,
    request_data,
)
from bookclub.services.meetings import (
    create_meeting,
    delete_meeting,
    finalize_meeting,
    get_meeting_details,
    list_meetings,
    log_past_meeting,
    update_meeting,
)
from bookclub.services.nominations import nominate
from bookclub.services.phase import get_book_club_state, get_meeting_phase
from bookclub.services.votes import toggle_vote


def register_meeting_routes(app):
    @app.route("/book-clubs/<int:book_club_id>/state")
    @login_required
    def book_club_state(book_club_id):
        result = get_book_club_state(book_club_id)
        if not result.ok:
            return error_response(result)

        state = result.value
        return {
            "ok": True,
            "state": state["state"].value,
            "meeting": meeting_payload(state["meeting"]),
            "previous_meeting": meeting_payload(state["previous_meeting"]),
        }

    @app.route("/book-clubs/<int:book_club_id>/meetings", methods=["GET", "POST"])
    @login_required
    def club_meetings(book_club_id):
        if request.method == "GET":
            result = list_meetings(book_club_id, current_user.id)
            if not result.ok:
                return error_response(result)
            return {
                "ok": True,
                "meetings": [
                    meeting_payload(row["meeting"], row["phase"]) for row in result.value
                ],
            }

        data = request_data()
        result = create_meeting(
            book_club_id,
            current_user.id,
            data.get("meeting_date"),
            nomination_deadline=data.get("nomination_deadline"),
            voting_deadline=data.get("voting_deadline"),
            theme_name=data.get("theme_name"),
            details=data.get("details"),
        )
        if not result.ok:
            return error_response(result)
        return {"ok": True, "meeting_id": result.value}, 201

    @app.route("/book-clubs/<int:book_club_id>/meetings/past", methods=["POST"])
    @login_required
    def log_past(book_club_id):
        data = request_data()
        result = log_past_meeting(
            book_club_id,
            current_user.id,
            data.get("meeting_date"),
            form_id(data.get("book_id")),
            theme_name=data.get("theme_name"),
            details=data.get("details"),
        )
        if not result.ok:
            return error_response(result)
        return {"ok": True, "meeting_id": result.value}, 201

    @app.route("/meetings/<int:meeting_id>")
    @login_required
    def meeting_detail(meeting_id):
        result = get_meeting_details(meeting_id, current_user.id)
        if not result.ok:
            return error_response(result)

        details = result.value
        tally = details["tally"]
        return {
            "ok": True,
            "meeting": meeting_payload(details["meeting"], details["phase"]),
            "current_user_is_admin": details["current_user_is_admin"],
            "total_votes": tally["total_votes"],
            "is_tie": tally["is_tie"],
            "book_options": [option_result_payload(row) for row in tally["option_results"]],
        }

    @app.route("/meetings/<int:meeting_id>/phase")
    @login_required
    def meeting_phase(meeting_id):
        result = get_meeting_phase(meeting_id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "phase": result.value.value}

    @app.route("/meetings/<int:meeting_id>/update", methods=["POST"])
    @login_required
    def update(meeting_id):
        data = request_data()
        result = update_meeting(
            meeting_id,
            current_user.id,
            data.get("meeting_date"),
            nomination_deadline=data.get("nomination_deadline"),
            voting_deadline=data.get("voting_deadline"),
            theme_name=data.get("theme_name"),
            details=data.get("details"),
            book_id=form_id(data.get("book_id")),
        )
        if not result.ok:
            return error_response(result)
        return {"ok": True}

    @app.route("/meetings/<int:meeting_id>/delete", methods=["POST"])
    @login_required
    def delete(meeting_id):
        result = delete_meeting(meeting_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True}

    @app.route("/meetings/<int:meeting_id>/nominate", methods=["POST"])
    @login_required
    def nominate_book(meeting_id):
        data = request_data()
        book = form_id(data.get("book_id")) or data.get("book")
        result = nominate(meeting_id, book, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "book_option_id": result.value}, 201

    @app.route("/book-options/<int:book_option_id>/vote", methods=["POST"])
    @login_required
    def vote(book_option_id):
        result = toggle_vote(book_option_id, current_user.id)
        if not result.ok:
            return error_response(result)
        return {"ok": True, "action": result.value.value}

    @app.route("/meetings/<int:meeting_id>/finalize", methods=["POST"])
    @login_required
    def finalize(meeting_id):
        data = request_data()
        result = finalize_meeting(
            meeting_id, form_id(data.get("selected_book_id")), current_user.id
        )
        if not result.ok:
            return error_response(result)
        return {"ok": True}
