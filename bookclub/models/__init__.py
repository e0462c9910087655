from bookclub.models.book import Book
from bookclub.models.book_club import BookClub
from bookclub.models.book_option import BookOption
from bookclub.models.meeting import Meeting
from bookclub.models.member import Member
from bookclub.models.personal_ranking import PersonalRanking
from bookclub.models.theme import Theme
from bookclub.models.theme_vote import ThemeVote
from bookclub.models.user import User
from bookclub.models.vote import Vote

__all__ = [
    "User",
    "BookClub",
    "Member",
    "Book",
    "Meeting",
    "BookOption",
    "Vote",
    "PersonalRanking",
    "Theme",
    "ThemeVote",
]
