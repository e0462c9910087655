from bookclub.extensions import db


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.UniqueConstraint(
            "external_source", "external_id", name="uq_books_external_identity"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    external_id = db.Column(db.String(100), nullable=False)
    external_source = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(500), nullable=False)
    author = db.Column(db.String(500), nullable=True)
    isbn = db.Column(db.String(20), nullable=True)
    cover_url = db.Column(db.String(1000), nullable=True)
    description = db.Column(db.Text, nullable=True)
    published_year = db.Column(db.Integer, nullable=True)
    page_count = db.Column(db.Integer, nullable=True)
