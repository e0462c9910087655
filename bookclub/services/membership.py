from bookclub.models import Member
from bookclub.services.errors import NotAMember, NotAnAdmin


def _membership(book_club_id, user_id):
    return Member.query.filter_by(book_club_id=book_club_id, user_id=user_id).first()


def is_member(book_club_id, user_id):
    return _membership(book_club_id, user_id) is not None


def is_admin(book_club_id, user_id):
    member = _membership(book_club_id, user_id)
    return bool(member and member.is_admin)


def require_member(book_club_id, user_id, message=None):
    member = _membership(book_club_id, user_id)
    if member is None:
        raise NotAMember(message)
    return member


def require_admin(book_club_id, user_id, message=None):
    member = _membership(book_club_id, user_id)
    if member is None or not member.is_admin:
        raise NotAnAdmin(message)
    return member
