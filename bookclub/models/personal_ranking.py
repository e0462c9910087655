from bookclub.extensions import db


class PersonalRanking(db.Model):
    __tablename__ = "personal_rankings"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "book_club_id", "year", "book_id",
            name="uq_personal_rankings_snapshot_book",
        ),
        db.Index("ix_personal_rankings_club_year", "book_club_id", "year"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    book_club_id = db.Column(
        db.Integer, db.ForeignKey("book_clubs.id", ondelete="CASCADE"), nullable=False
    )
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    # NULL means "not read"
    rank = db.Column(db.Integer, nullable=True)

    book = db.relationship("Book", lazy=True)
