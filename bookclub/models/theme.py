from bookclub.extensions import db
from bookclub.services.clock import utcnow


class Theme(db.Model):
    __tablename__ = "themes"

    id = db.Column(db.Integer, primary_key=True)
    book_club_id = db.Column(
        db.Integer, db.ForeignKey("book_clubs.id", ondelete="CASCADE"), nullable=False
    )
    name = db.Column(db.String(200), nullable=False)
    submitted_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    upvotes = db.relationship(
        "ThemeVote", backref="theme", lazy=True, cascade="all, delete-orphan"
    )
