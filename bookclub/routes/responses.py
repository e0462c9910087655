from flask import request


def request_data():
    """JSON body of the request, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def form_id(value):
    """Ids posted as form fields arrive as strings."""
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            return value or None
    return value


def error_response(result):
    error = result.error
    return {"ok": False, "kind": error.kind, "error": error.message}, error.status_code


def _isoformat(value):
    return value.isoformat() if value is not None else None


def book_payload(book):
    if book is None:
        return None
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "cover_url": book.cover_url,
        "description": book.description,
        "published_year": book.published_year,
    }


def theme_payload(theme):
    if theme is None:
        return None
    return {"id": theme.id, "name": theme.name}


def meeting_payload(meeting, phase=None):
    if meeting is None:
        return None
    payload = {
        "id": meeting.id,
        "book_club_id": meeting.book_club_id,
        "meeting_date": _isoformat(meeting.meeting_date),
        "nomination_deadline": _isoformat(meeting.nomination_deadline),
        "voting_deadline": _isoformat(meeting.voting_deadline),
        "is_finalized": meeting.is_finalized,
        "finalized_at": _isoformat(meeting.finalized_at),
        "selected_book_id": meeting.selected_book_id,
        "selected_book": book_payload(meeting.selected_book),
        "theme": theme_payload(meeting.theme),
        "details": meeting.details,
    }
    if phase is not None:
        payload["phase"] = phase.value
    return payload


def option_result_payload(row):
    option = row["option"]
    return {
        "id": option.id,
        "book": book_payload(option.book),
        "added_by": option.added_by,
        "created_at": _isoformat(option.created_at),
        "vote_count": row["count"],
        "percent": row["percent"],
        "user_has_voted": row["user_has_voted"],
    }
