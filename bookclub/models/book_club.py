from bookclub.extensions import db
from bookclub.services.clock import utcnow


class BookClub(db.Model):
    __tablename__ = "book_clubs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    members = db.relationship(
        "Member", backref="book_club", lazy=True, cascade="all, delete-orphan"
    )
    meetings = db.relationship(
        "Meeting", backref="book_club", lazy=True, cascade="all, delete-orphan"
    )
    themes = db.relationship(
        "Theme", backref="book_club", lazy=True, cascade="all, delete-orphan"
    )
