from bookclub.extensions import db
from bookclub.services.clock import utcnow


class Meeting(db.Model):
    __tablename__ = "meetings"
    __table_args__ = (
        db.CheckConstraint(
            "(is_finalized AND selected_book_id IS NOT NULL)"
            " OR (NOT is_finalized AND selected_book_id IS NULL)",
            name="ck_meetings_finalized_has_book",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    book_club_id = db.Column(
        db.Integer,
        db.ForeignKey("book_clubs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meeting_date = db.Column(db.DateTime, nullable=False)
    nomination_deadline = db.Column(db.DateTime, nullable=True)
    voting_deadline = db.Column(db.DateTime, nullable=True)
    is_finalized = db.Column(db.Boolean, nullable=False, default=False)
    selected_book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=True)
    finalized_at = db.Column(db.DateTime, nullable=True)
    finalized_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    theme_id = db.Column(
        db.Integer, db.ForeignKey("themes.id", ondelete="SET NULL"), nullable=True
    )
    details = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    book_options = db.relationship(
        "BookOption", backref="meeting", lazy=True, cascade="all, delete-orphan"
    )
    selected_book = db.relationship("Book", lazy=True)
    theme = db.relationship("Theme", backref=db.backref("meetings", lazy=True))
