from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookclub.extensions import db
from bookclub.models import Theme, ThemeVote
from bookclub.services.errors import DuplicateTheme, NotFound, ValidationError
from bookclub.services.fuzzy import find_fuzzy_match
from bookclub.services.membership import require_member
from bookclub.services.results import service_action
from bookclub.services.votes import VoteAction


def _club_themes(book_club_id):
    return (
        Theme.query.filter_by(book_club_id=book_club_id)
        .order_by(Theme.created_at.asc(), Theme.id.asc())
        .all()
    )


def find_or_create_theme(book_club_id, user_id, name):
    """Reuse the club's theme that fuzzy-matches ``name`` or add a new one.

    Returns ``None`` for a blank name. The new theme is flushed, not committed.
    """
    name = (name or "").strip()
    if not name:
        return None

    existing = find_fuzzy_match(name, _club_themes(book_club_id))
    if existing is not None:
        return existing

    theme = Theme(book_club_id=book_club_id, name=name, submitted_by=user_id)
    db.session.add(theme)
    db.session.flush()
    return theme


@service_action
def suggest_theme(book_club_id, user_id, name):
    require_member(book_club_id, user_id, "You must be a member to suggest themes.")

    name = " ".join((name or "").split())
    if not name:
        raise ValidationError("Theme name is required.")

    existing = find_fuzzy_match(name, _club_themes(book_club_id))
    if existing is not None:
        raise DuplicateTheme(f'Theme "{existing.name}" already exists.')

    theme = Theme(book_club_id=book_club_id, name=name, submitted_by=user_id)
    db.session.add(theme)
    db.session.commit()

    current_app.logger.info("User %s suggested theme %s in club %s", user_id, theme.id, book_club_id)
    return theme.id


@service_action
def toggle_theme_upvote(theme_id, user_id):
    theme = db.session.get(Theme, theme_id)
    if theme is None:
        raise NotFound("Theme not found.")
    require_member(theme.book_club_id, user_id, "You must be a member to vote on themes.")

    existing = ThemeVote.query.filter_by(theme_id=theme.id, user_id=user_id).first()
    if existing is not None:
        ThemeVote.query.filter_by(id=existing.id).delete(synchronize_session=False)
        db.session.commit()
        return VoteAction.REMOVED

    db.session.add(ThemeVote(theme_id=theme.id, user_id=user_id))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning(
            "Upvote by user %s on theme %s was already recorded", user_id, theme_id
        )
    return VoteAction.ADDED


@service_action
def list_themes(book_club_id, user_id):
    require_member(book_club_id, user_id)

    themes = (
        Theme.query.filter_by(book_club_id=book_club_id)
        .order_by(Theme.created_at.desc(), Theme.id.desc())
        .all()
    )
    return [
        {
            "theme": theme,
            "upvote_count": len(theme.upvotes),
            "user_has_upvoted": any(vote.user_id == user_id for vote in theme.upvotes),
            "times_used": len(theme.meetings),
        }
        for theme in themes
    ]


@service_action
def get_theme_suggestions(book_club_id, user_id):
    """Theme names for autocomplete: unused themes first, then most upvoted."""
    require_member(book_club_id, user_id)

    themes = _club_themes(book_club_id)
    themes.sort(key=lambda theme: (len(theme.meetings) > 0, -len(theme.upvotes)))
    return [theme.name for theme in themes]
