from bookclub.extensions import db
from bookclub.services.clock import utcnow


class Vote(db.Model):
    __tablename__ = "votes"
    __table_args__ = (
        db.UniqueConstraint("book_option_id", "user_id", name="uq_votes_option_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    book_option_id = db.Column(
        db.Integer, db.ForeignKey("book_options.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
