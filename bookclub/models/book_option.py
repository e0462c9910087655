from bookclub.extensions import db
from bookclub.services.clock import utcnow


class BookOption(db.Model):
    __tablename__ = "book_options"
    __table_args__ = (
        db.UniqueConstraint("meeting_id", "book_id", name="uq_book_options_meeting_book"),
    )

    id = db.Column(db.Integer, primary_key=True)
    meeting_id = db.Column(
        db.Integer, db.ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False
    )
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False)
    added_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    book = db.relationship("Book", lazy=True)
    votes = db.relationship(
        "Vote", backref="book_option", lazy=True, cascade="all, delete-orphan"
    )
