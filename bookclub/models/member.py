from bookclub.extensions import db
from bookclub.services.clock import utcnow


class Member(db.Model):
    __tablename__ = "members"
    __table_args__ = (
        db.UniqueConstraint("book_club_id", "user_id", name="uq_members_club_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    book_club_id = db.Column(
        db.Integer, db.ForeignKey("book_clubs.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)
