from datetime import datetime, timedelta
from pathlib import Path
import sys
import os

import pytest
from flask import g

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from bookclub import create_app
from bookclub.extensions import db
from bookclub.models import Book, BookClub, BookOption, Meeting, Member, User

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
        }
    )

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def make_user(db_session):
    def _make_user(username):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash="hashed-password",
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin1")


@pytest.fixture()
def member_user(make_user):
    return make_user("reader1")


@pytest.fixture()
def outsider(make_user):
    return make_user("stranger")


@pytest.fixture()
def book_club(db_session, admin_user, member_user):
    club = BookClub(name="Tuesday Readers")
    db_session.add(club)
    db_session.flush()
    db_session.add_all(
        [
            Member(book_club_id=club.id, user_id=admin_user.id, is_admin=True),
            Member(book_club_id=club.id, user_id=member_user.id, is_admin=False),
        ]
    )
    db_session.commit()
    return club


@pytest.fixture()
def add_member(db_session, book_club):
    def _add_member(user, is_admin=False):
        db_session.add(Member(book_club_id=book_club.id, user_id=user.id, is_admin=is_admin))
        db_session.commit()
        return user

    return _add_member


@pytest.fixture()
def make_book(db_session):
    counter = {"n": 0}

    def _make_book(title):
        counter["n"] += 1
        book = Book(
            external_id=f"vol-{counter['n']}",
            external_source="google_books",
            title=title,
            author="Some Author",
        )
        db_session.add(book)
        db_session.commit()
        return book

    return _make_book


@pytest.fixture()
def make_meeting(db_session, book_club):
    def _make_meeting(
        nomination_deadline=NOW + timedelta(days=7),
        voting_deadline=NOW + timedelta(days=14),
        meeting_date=NOW + timedelta(days=21),
    ):
        meeting = Meeting(
            book_club_id=book_club.id,
            meeting_date=meeting_date,
            nomination_deadline=nomination_deadline,
            voting_deadline=voting_deadline,
            is_finalized=False,
        )
        db_session.add(meeting)
        db_session.commit()
        return meeting

    return _make_meeting


@pytest.fixture()
def make_option(db_session):
    def _make_option(meeting, book, user):
        option = BookOption(meeting_id=meeting.id, book_id=book.id, added_by=user.id)
        db_session.add(option)
        db_session.commit()
        return option

    return _make_option


@pytest.fixture()
def login(client):
    def _login(user):
        # the app context outlives requests, so drop the user Flask-Login cached on g
        g.pop("_login_user", None)
        with client.session_transaction() as session:
            session["_user_id"] = str(user.id)
            session["_fresh"] = True
        return client

    return _login
