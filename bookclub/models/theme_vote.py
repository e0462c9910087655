from bookclub.extensions import db


class ThemeVote(db.Model):
    __tablename__ = "theme_votes"
    __table_args__ = (
        db.UniqueConstraint("theme_id", "user_id", name="uq_theme_votes_theme_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    theme_id = db.Column(
        db.Integer, db.ForeignKey("themes.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
